from dataclasses import dataclass

from src.cobalt_cms.core.services.database.db_session import DbSessionService
from src.cobalt_cms.core.services.jwt.jwt_gen import JwtGeneratorService
from src.cobalt_cms.core.services.jwt.jwt_verify import JwtVerificationService
from src.cobalt_cms.core.services.session.admin_session import AdminSessionService
from src.cobalt_cms.core.services.token.codec import ExternalTokenCodec
from src.cobalt_cms.core.storage.session_storage import SessionStorage, get_session_storage


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    session_storage: SessionStorage
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    admin_session_service: AdminSessionService
    token_codec: ExternalTokenCodec


async def build_dependencies(
    database_service: DbSessionService | None = None,
    session_storage: SessionStorage | None = None,
) -> ApplicationDependencies:
    """Wire the process-wide services; callers may supply their own database or storage."""
    storage = session_storage or await get_session_storage()
    jwt_generation_service = JwtGeneratorService()
    jwt_verify_service = JwtVerificationService()
    return ApplicationDependencies(
        database_service=database_service or DbSessionService(),
        session_storage=storage,
        jwt_generation_service=jwt_generation_service,
        jwt_verify_service=jwt_verify_service,
        admin_session_service=AdminSessionService(
            storage, jwt_generation_service, jwt_verify_service
        ),
        token_codec=ExternalTokenCodec(),
    )
