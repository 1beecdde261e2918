from sqlmodel import Session

from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.core.services.identity.audit import LoginAuditService
from src.cobalt_cms.entities.core.admin_role import AdminRole
from src.cobalt_cms.entities.core.login_audit import LoginAudit, LoginAuditRepository


class TestLoginAuditService:
    def test_subsequent_login_increments_count(
        self, session: Session, super_admin_role: AdminRole, admin_user_factory
    ):
        user = admin_user_factory("a@x.com", [super_admin_role])
        repo = LoginAuditRepository(session)
        repo.create(LoginAudit(cobalt_user_id="c-1", admin_user_id=user.id))
        session.commit()

        LoginAuditService(session).record_login(user, ExternalClaims.from_payload({"sub": "c-1"}))

        record = repo.get_by_cobalt_user_id("c-1")
        assert record is not None
        assert record.login_count == 2

    def test_missing_record_is_created(
        self, session: Session, super_admin_role: AdminRole, admin_user_factory
    ):
        user = admin_user_factory("a@x.com", [super_admin_role])

        LoginAuditService(session).record_login(
            user, ExternalClaims.from_payload({"id": "c-2", "username": "cee"})
        )

        record = LoginAuditRepository(session).get_by_cobalt_user_id("c-2")
        assert record is not None
        assert record.login_count == 1
        assert record.cobalt_username == "cee"

    def test_claims_without_subject_are_ignored(
        self, session: Session, super_admin_role: AdminRole, admin_user_factory
    ):
        user = admin_user_factory("a@x.com", [super_admin_role])

        LoginAuditService(session).record_login(user, ExternalClaims.from_payload({}))

        assert LoginAuditRepository(session).get_by_cobalt_user_id("") is None
