# backend_api/main.py
from __future__ import annotations

import logging
import time
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend_api.config import settings
from backend_api.db import Base, SessionLocal, engine
from backend_api.errors import ApiError

# Registrar todos los modelos (users, posts, comments)
import backend_api.models  # noqa: F401
from backend_api.models.user import Role

# Routers
from backend_api.routers.auth import router as auth_router
from backend_api.routers.users import router as users_router
from backend_api.routers.posts import router as posts_router
from backend_api.routers.comments import router as comments_router
from backend_api.services.users import UserService


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
log = logging.getLogger("backend_api")

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

# ==================== MIDDLEWARES ====================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start
    log.info("%s %s - %s - %.4fs", request.method, request.url.path, response.status_code, elapsed)
    return response


# ==================== ERRORES ====================

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = {}
    for err in exc.errors():
        # loc = ("body", "title") / ("query", "page") ...
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        fields[".".join(loc) or "request"] = err.get("msg", "invalid value")
    return JSONResponse(
        status_code=400,
        content={"error": "INVALID_INPUT", "message": "Validation failed", "fields": fields},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    log.warning("Violación de restricción en %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"error": "CONFLICT", "message": "Request conflicts with existing data"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Rutas inexistentes (404), métodos no permitidos (405)...
    try:
        tag = HTTPStatus(exc.status_code).name
    except ValueError:
        tag = "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": tag, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    )


# ==================== ROUTERS ====================

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(posts_router)
app.include_router(comments_router)


# ==================== CICLO DE VIDA ====================

def seed_admin() -> None:
    """Crea la cuenta de administrador configurada si todavía no existe."""
    if not (settings.ADMIN_USERNAME and settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        users = UserService(db)
        if users.exists_by_username(settings.ADMIN_USERNAME):
            return
        users.create(
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            role=Role.ADMIN,
        )
        log.info("Administrador inicial creado: %s", settings.ADMIN_USERNAME)
    finally:
        db.close()


@app.on_event("startup")
async def on_startup():
    log.info("Creando tablas de base de datos (users, posts, comments)...")
    Base.metadata.create_all(bind=engine)
    seed_admin()
    log.info("%s lista", settings.APP_NAME)


@app.on_event("shutdown")
async def on_shutdown():
    log.info("Apagando %s...", settings.APP_NAME)


# Arranque directo opcional: python -m backend_api.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend_api.main:app", host="0.0.0.0", port=8000, reload=True)
