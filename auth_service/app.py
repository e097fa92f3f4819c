"""Fábrica de la aplicación FastAPI del Auth Service: wiring, middleware, handlers de error y monitoreo."""

import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth_service import schemas
from auth_service.config import Settings, load_settings
from auth_service.db import build_database_url, check_db_connection, create_db_engine, create_session_factory, init_db
from auth_service.errors import ServiceError, Unauthorized
from auth_service.metrics import REQUEST_COUNT, REQUEST_LATENCY
from auth_service.password import PasswordHasher
from auth_service.routes import auth_router, profile_router
from auth_service.tokens import TokenIssuer

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_response(status_code: int, code: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """Respuesta de error con la forma {error: {code, message}}."""
    body = schemas.ErrorResponse(error=schemas.ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


# --- Handlers de error ---

async def service_error_handler(request: Request, exc: ServiceError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} en {request.method} {request.url.path}")
    return error_response(exc.status_code, exc.code, exc.message, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Payload inválido en {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_PAYLOAD", "invalid payload")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))


def create_app(settings: Optional[Settings] = None, password_hasher: Optional[PasswordHasher] = None) -> FastAPI:
    """
    Construye la aplicación. Sin settings explícitos lee el entorno, y sin
    JWT_SECRET falla con EnvironmentError antes de aceptar peticiones.
    """
    if settings is None:
        settings = load_settings()

    engine = create_db_engine(build_database_url(settings.db_path, settings.database_url))
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Auth Service iniciado.")
        yield
        engine.dispose()
        logger.info("Conexiones a la base de datos liberadas. Auth Service detenido.")

    app = FastAPI(
        title="Auth Service",
        description="Handles user registration, authentication and profile management.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Componentes compartidos (inmutables) entre peticiones
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = password_hasher or PasswordHasher()
    app.state.token_issuer = TokenIssuer(settings.jwt_secret, settings.token_issuer)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # --- Middleware para Métricas ---
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start_time = time.time()
        response = None
        status_code = 500 # Default a 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as exc:
            logger.error(f"Unhandled exception during request processing: {exc}", exc_info=True)
            response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "internal error")
        finally:
            latency = time.time() - start_time
            endpoint = request.url.path

            final_status_code = getattr(response, 'status_code', status_code)

            REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=final_status_code
            ).inc()

        return response

    # --- Endpoints de Salud y Métricas ---
    @app.get("/metrics", tags=["Monitoring"])
    def metrics():
        """Exposes application metrics for Prometheus."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health", response_model=schemas.HealthResponse, tags=["Monitoring"])
    def health_check():
        """Performs a basic health check of the service and its database."""
        database = "ok" if check_db_connection(app.state.engine) else "unavailable"
        return {"status": "ok", "service": "auth_service", "database": database}

    @app.get("/healthz", tags=["Monitoring"])
    def liveness():
        return Response(status_code=status.HTTP_200_OK)

    # --- Endpoints de API ---
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(profile_router, prefix=API_PREFIX)

    return app
