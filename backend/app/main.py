from __future__ import annotations

import time
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.core.settings import settings
from app.core.logging import setup_logging
from app.core.errors import error_payload, AppHTTPException, DomainError
from app.core.request_id import set_request_id, ensure_request_id, current_request_id

"""
Application FastAPI (entrypoint).

Rôle (fonctionnel) :
- Configure l’application (settings, CORS, middleware, routers).
- Centralise l’observabilité :
  - request_id propagé (X-Request-Id)
  - logs structurés JSON (timing, status, client_ip)
  - seuil de “slow request”
- Uniformise les erreurs côté client (format error_payload) :
  - erreurs métier (DomainError) -> 400 / 404 / 409 selon leur code
  - validation Pydantic -> 422
  - contraintes base (unicité, version concurrente) -> 409
  - le reste -> 500, stacktrace uniquement dans les logs

Ce fichier ne contient pas de logique métier :
- La logique métier est dans app.services / app.validation
- Les routes sont dans app.api
- Les composants transverses sont dans app.core
"""


class UTF8JSONResponse(JSONResponse):
    """Réponse JSON avec charset UTF-8 explicite (cohérent sur tous les endpoints)."""
    media_type = "application/json; charset=utf-8"


setup_logging(settings.LOG_LEVEL)

# logger principal projet
log = logging.getLogger("app")

# logger dédié observabilité HTTP (séparé du métier)
http_log = logging.getLogger("app.http")

# logger des erreurs renvoyées au client
error_log = logging.getLogger("app.errors")

SLOW_MS = int(settings.SLOW_REQUEST_MS)


def _split_origins(value: str) -> list[str]:
    """Parse une liste d’origines CORS depuis une string 'a,b,c'."""
    if not value:
        return []
    return [o.strip() for o in value.split(",") if o.strip()]


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    default_response_class=UTF8JSONResponse,
)

# --- CORS ---
origins = _split_origins(settings.CORS_ORIGINS)

# Origines par défaut en dev (Vite + React)
default_dev_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or default_dev_origins,
    allow_credentials=False,  # pas de cookies (API stateless)
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-API-Key",
        "X-Request-Id",
    ],
)

# --- Routers ---
app.include_router(api_router)


# --- Middleware observabilité : request_id + timing + logs structurés ---
@app.middleware("http")
async def request_observability(request: Request, call_next):
    rid = ensure_request_id(request.headers.get("X-Request-Id"))
    request.state.request_id = rid

    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)

        # Slow request => WARNING, sinon INFO
        level = logging.WARNING if duration_ms >= SLOW_MS else logging.INFO
        http_log.log(
            level,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": getattr(response, "status_code", None),
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )

        set_request_id(None)


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", None) or current_request_id()


def _error_response(request: Request, *, status: int, code: str, message: str, details=None) -> UTF8JSONResponse:
    return UTF8JSONResponse(
        status_code=status,
        content=error_payload(
            code=code,
            message=message,
            status=status,
            request_id=_rid(request),
            details=jsonable_encoder(details) if details is not None else None,
        ),
    )


# --- Error handlers : format standard, pas de stacktrace côté client ---
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Erreurs métier (validation, introuvable, conflit, transition) -> payload standard."""
    error_log.warning(
        exc.message,
        extra={"error_code": exc.code, "status_code": exc.status_code, "path": request.url.path},
    )
    return _error_response(
        request,
        status=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details or None,
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Contrainte base violée (ex. doublon concurrent) : la base reste l’arbitre final."""
    error_log.warning("integrity_error", extra={"error_code": "CONFLICT", "path": request.url.path})
    return _error_response(request, status=409, code="CONFLICT", message="Conflit avec une donnée existante")


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    """Version de ligne obsolète : une écriture concurrente est passée avant."""
    error_log.warning("stale_data", extra={"error_code": "CONFLICT", "path": request.url.path})
    return _error_response(
        request,
        status=409,
        code="CONFLICT",
        message="La ressource a été modifiée entre-temps, veuillez réessayer",
    )


@app.exception_handler(AppHTTPException)
async def app_http_exception_handler(request: Request, exc: AppHTTPException):
    """Erreurs applicatives transport (AppHTTPException) -> payload standard."""
    detail = exc.detail if isinstance(exc.detail, dict) else {}
    return _error_response(
        request,
        status=exc.status_code,
        code=str(detail.get("code", "HTTP_ERROR")),
        message=str(detail.get("message", "Erreur HTTP")),
        details=detail.get("details", None),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Erreurs HTTP natives (404, 405, etc.) -> payload standard."""
    if isinstance(exc.detail, dict):
        code = str(exc.detail.get("code", "HTTP_ERROR"))
        message = str(exc.detail.get("message", "Erreur HTTP"))
        details = exc.detail.get("details", None)
    else:
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        message = str(exc.detail)
        details = None

    return _error_response(request, status=exc.status_code, code=code, message=message, details=details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Erreurs de validation Pydantic (dont valeurs d’énumération inconnues) -> 422."""
    return _error_response(
        request,
        status=422,
        code="VALIDATION_ERROR",
        message="Requête invalide",
        details=exc.errors(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Fallback : toute exception non gérée -> 500 + log serveur."""
    log.exception("Unhandled error: %s", exc)
    return _error_response(request, status=500, code="INTERNAL_ERROR", message="Erreur interne du serveur")
