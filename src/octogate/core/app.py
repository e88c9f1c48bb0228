import logging
import platform
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from octogate.core.exceptions import MissingInputError, OctogateError, ProviderError, UnauthorizedError
from octogate.core.exchange import TokenExchangeClient, build_exchange_client
from octogate.core.settings import OctogateSettings
from octogate.models import CallbackRequest, ExchangeResult, HealthResponse, MessageResponse, UserResponse
from octogate.session.store import InMemorySessionStore, SessionStoreProtocol

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_BEARER_SCHEME = "bearer"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def parse_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, sep, value = authorization.lstrip().partition(" ")
    if scheme.lower() == _BEARER_SCHEME:
        return value.strip() or None
    if sep:
        return None
    return scheme.strip() or None


def get_settings(request: Request) -> OctogateSettings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStoreProtocol:
    return request.app.state.session_store


def get_exchange_client(request: Request) -> TokenExchangeClient:
    return request.app.state.exchange_client


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = MessageResponse(success=False, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _status_for(exc: OctogateError) -> int:
    if isinstance(exc, MissingInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, UnauthorizedError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ProviderError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_router() -> APIRouter:
    """Create router with the login API endpoints.

    - GET /api/health - Liveness probe
    - POST /api/auth/github/callback - Authorization code exchange
    - GET /api/auth/user - Current user for a session token
    - POST /api/auth/logout - Session teardown
    """
    router = APIRouter(prefix="/api", tags=["auth"])

    async def health(
        settings: Annotated[OctogateSettings, Depends(get_settings)],
    ) -> HealthResponse:
        return HealthResponse(
            timestamp=datetime.now(UTC).isoformat(),
            service=settings.service_name,
            python_version=platform.python_version(),
        )

    async def github_callback(
        exchange_client: Annotated[TokenExchangeClient, Depends(get_exchange_client)],
        body: CallbackRequest | None = None,
    ) -> ExchangeResult:
        payload = body or CallbackRequest()
        logger.info(
            "Received GitHub code exchange request (code %s)",
            "provided" if payload.code else "missing",
        )
        try:
            return await exchange_client.exchange_code(payload.code, payload.state)
        except OctogateError:
            raise
        except Exception as e:
            logger.exception("Unexpected error while handling GitHub callback")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"GitHub callback failed: {e}",
            ) from e

    async def current_user(
        store: Annotated[SessionStoreProtocol, Depends(get_session_store)],
        authorization: Annotated[str | None, Header()] = None,
    ) -> UserResponse:
        if authorization is None:
            msg = "missing authorization header"
            raise UnauthorizedError(msg)

        token = parse_bearer_token(authorization)
        if not token or not (user := store.get(token)):
            msg = "invalid access token"
            raise UnauthorizedError(msg)

        return UserResponse(user=user)

    async def logout(
        store: Annotated[SessionStoreProtocol, Depends(get_session_store)],
        authorization: Annotated[str | None, Header()] = None,
    ) -> MessageResponse:
        if (token := parse_bearer_token(authorization)) and store.delete(token):
            logger.info("Session signed out")
        return MessageResponse(success=True, message="logged out")

    router.add_api_route("/health", health, methods=["GET"], response_model=HealthResponse)
    router.add_api_route("/auth/github/callback", github_callback, methods=["POST"], response_model=ExchangeResult)
    router.add_api_route("/auth/user", current_user, methods=["GET"], response_model=UserResponse)
    router.add_api_route("/auth/logout", logout, methods=["POST"], response_model=MessageResponse)
    return router


def create_app(
    settings: OctogateSettings | None = None,
    *,
    session_store: SessionStoreProtocol | None = None,
    exchange_client: TokenExchangeClient | None = None,
) -> FastAPI:
    """Build the login API application.

    Args:
        settings: Application settings, loaded from the environment when omitted
        session_store: Store shared by all handlers, a fresh in-memory store when omitted
        exchange_client: Exchange client override, built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or OctogateSettings()
    session_store = session_store if session_store is not None else InMemorySessionStore()
    exchange_client = exchange_client or build_exchange_client(settings, session_store)

    logger.info(
        "GitHub config: client_id %s, client_secret %s, redirect_uri %s, mode %s, demo fallback %s",
        "set" if settings.github.client_id else "unset",
        "set" if settings.github.client_secret.get_secret_value() else "unset",
        settings.github.redirect_uri,
        settings.provider_mode,
        "on" if settings.fallback_to_demo else "off",
    )
    if settings.provider_mode == "live" and not settings.github.configured:
        logger.warning("GitHub OAuth credentials are not configured, live logins will fail")

    app = FastAPI(title=settings.service_name)
    app.state.settings = settings
    app.state.session_store = session_store
    app.state.exchange_client = exchange_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:  # noqa: ANN001
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(OctogateError)
    async def octogate_error_handler(_: Request, exc: OctogateError) -> JSONResponse:
        return _error_response(_status_for(exc), str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected malformed request: %s", exc.errors())
        return _error_response(status.HTTP_400_BAD_REQUEST, "invalid request body")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, _: Exception) -> JSONResponse:
        logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")

    app.include_router(build_router())
    return app
