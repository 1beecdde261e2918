import time

import pytest

from src.cobalt_cms.core.models.claims import ExternalClaims


class TestExternalClaims:
    """Alias collapsing at the token boundary."""

    def test_empty_payload(self):
        claims = ExternalClaims.from_payload({})

        assert claims.subject is None
        assert claims.email is None
        assert claims.roles == []
        assert claims.scopes == []
        assert claims.is_cms is False
        assert claims.is_expired() is False

    def test_subject_aliases_in_order(self):
        assert ExternalClaims.from_payload({"sub": "s", "id": "i"}).subject == "s"
        assert ExternalClaims.from_payload({"sub": "", "id": 42}).subject == "42"
        assert ExternalClaims.from_payload({"user_id": "u"}).subject == "u"

    def test_name_aliases(self):
        claims = ExternalClaims.from_payload(
            {"name": "Grace", "family_name": "Hopper", "preferred_username": "ghopper"}
        )
        assert claims.firstname == "Grace"
        assert claims.lastname == "Hopper"
        assert claims.username == "ghopper"

    def test_roles_accept_strings_and_objects(self):
        claims = ExternalClaims.from_payload(
            {"roles": ["editor", {"name": "CMS Admin"}, {"code": "author"}, {}]}
        )
        assert claims.roles == ["editor", "CMS Admin", "author"]

        assert ExternalClaims.from_payload({"role": "admin"}).roles == ["admin"]
        assert ExternalClaims.from_payload({"authorities": ["ROLE_CMS"]}).roles == ["ROLE_CMS"]

    def test_scope_string_is_space_split(self):
        claims = ExternalClaims.from_payload({"scope": "read  cms:write"})
        assert claims.scopes == ["read", "cms:write"]
        assert ExternalClaims.from_payload({"permissions": ["a", "b"]}).scopes == ["a", "b"]

    def test_roles_drop_other_entries(self):
        claims = ExternalClaims.from_payload({"roles": ["editor", 7, None, ["cms"], True]})
        assert claims.roles == ["editor"]
        assert ExternalClaims.from_payload({"role": 42}).roles == []

    @pytest.mark.parametrize("scope", [{"cms": True}, 7, True])
    def test_scope_of_other_shapes_is_empty(self, scope):
        assert ExternalClaims.from_payload({"scope": scope}).scopes == []

    def test_scope_list_keeps_only_scalars(self):
        claims = ExternalClaims.from_payload({"scope": ["cms:read", 3, {"cms": True}, ["admin"]]})
        assert claims.scopes == ["cms:read", "3"]

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"isCMS": True}, True),
            ({"isCms": "TRUE"}, True),
            ({"is_cms": "true"}, True),
            ({"isCMS": "yes"}, False),
            ({"isCMS": False, "isCms": True}, False),
            ({"isCMS": None, "isCms": True}, True),
            ({"is_cms": 1}, False),
            ({}, False),
        ],
    )
    def test_cms_flag(self, payload: dict, expected: bool):
        assert ExternalClaims.from_payload(payload).is_cms is expected

    def test_expiry(self):
        now = time.time()
        assert ExternalClaims.from_payload({"exp": now - 10}).is_expired() is True
        assert ExternalClaims.from_payload({"exp": now + 600}).is_expired() is False
        assert ExternalClaims.from_payload({"exp": "not-a-number"}).expires_at is None

    def test_raw_payload_kept(self):
        payload = {"email": "a@b.c", "custom": {"x": 1}}
        assert ExternalClaims.from_payload(payload).raw == payload
