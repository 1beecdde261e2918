"""Service and application fixtures."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine

from src.cobalt_cms.api.http.app import create_app
from src.cobalt_cms.api.http.app_data import ApplicationDependencies
from src.cobalt_cms.core.services.database.db_session import DbSessionService
from src.cobalt_cms.core.services.jwt.jwt_gen import JwtGeneratorService
from src.cobalt_cms.core.services.jwt.jwt_verify import JwtVerificationService
from src.cobalt_cms.core.services.session.admin_session import AdminSessionService
from src.cobalt_cms.core.services.token.codec import ExternalTokenCodec
from src.cobalt_cms.core.storage.session_storage import InMemorySessionStorage

__all__ = [
    "admin_session_service",
    "app",
    "app_dependencies",
    "client",
    "jwt_generate_service",
    "jwt_verify_service",
    "session_storage",
]


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def jwt_generate_service() -> JwtGeneratorService:
    return JwtGeneratorService()


@pytest.fixture
def jwt_verify_service() -> JwtVerificationService:
    return JwtVerificationService()


@pytest.fixture
def admin_session_service(
    session_storage: InMemorySessionStorage,
    jwt_generate_service: JwtGeneratorService,
    jwt_verify_service: JwtVerificationService,
) -> AdminSessionService:
    return AdminSessionService(session_storage, jwt_generate_service, jwt_verify_service)


@pytest.fixture
def app_dependencies(
    engine: Engine,
    session_storage: InMemorySessionStorage,
    jwt_generate_service: JwtGeneratorService,
    jwt_verify_service: JwtVerificationService,
    admin_session_service: AdminSessionService,
) -> ApplicationDependencies:
    return ApplicationDependencies(
        database_service=DbSessionService(engine=engine),
        session_storage=session_storage,
        jwt_generation_service=jwt_generate_service,
        jwt_verify_service=jwt_verify_service,
        admin_session_service=admin_session_service,
        token_codec=ExternalTokenCodec(),
    )


@pytest.fixture
def app(app_dependencies: ApplicationDependencies) -> FastAPI:
    app = create_app()
    app.state.app_dependencies = app_dependencies
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
