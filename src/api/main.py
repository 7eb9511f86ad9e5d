"""
FastAPI backend: Contact Book REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from neo4j import GraphDatabase
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.contacts import router as contacts_router
from api.responses import error_response, server_error
from api.settings import Settings, load_env_file
from contactbook.application import ContactRepository
from contactbook.infrastructure import Neo4jContactRepository, ensure_contact_schema

load_env_file()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _get_driver(settings: Settings):
    return GraphDatabase.driver(
        settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the Neo4j driver for the life of the process, unless a repository was injected."""
    if app.state.repository is not None:
        yield
        return
    settings: Settings = app.state.settings
    driver = _get_driver(settings)
    try:
        ensure_contact_schema(driver)
        app.state.repository = Neo4jContactRepository(driver)
        logger.info("Connected to Neo4j at %s", settings.neo4j_uri)
        yield
    finally:
        app.state.repository = None
        driver.close()
        logger.info("Neo4j driver closed")


def _validation_details(exc: RequestValidationError) -> list[str]:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return details


def create_app(
    repository: ContactRepository | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app. Pass a repository to skip Neo4j entirely (tests, local runs)."""
    settings = settings or Settings.from_env()
    app = FastAPI(title="Contact Book API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation Error",
            details=_validation_details(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response(exc.status_code, f"Not Found - {request.url.path}")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return server_error(request, "Server Error", exc)

    @app.get("/")
    def index():
        return {
            "message": "Contact Book API is running!",
            "version": API_VERSION,
            "endpoints": {
                "contacts": "/api/contacts",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(contacts_router)
    return app


app = create_app()
