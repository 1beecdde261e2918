from src.cobalt_cms.core.security import (
    generate_placeholder_password,
    generate_secure_token,
    hash_password,
    verify_password,
)


class TestCredentials:
    def test_placeholder_passwords_are_unique(self):
        first = generate_placeholder_password()
        second = generate_placeholder_password()

        assert first.startswith("cobalt_")
        assert first != second
        assert len(first) > len("cobalt_") + 20

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert verify_password(hashed, "s3cret")
        assert not verify_password(hashed, "other")
        assert not verify_password("not-a-hash", "s3cret")

    def test_secure_token_is_url_safe(self):
        token = generate_secure_token()
        assert "=" not in token and "+" not in token and "/" not in token
