import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Uvicorn nereden çalışırsa çalışsın .env proje kökünden yüklensin
_PROJ_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJ_ROOT / ".env")

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from storefront_admin.admin import admin_router
from storefront_admin.core.config import is_catalog_configured, settings
from storefront_admin.core.errors import CatalogError
from storefront_admin.core.rate_limit import limiter
from storefront_admin.logging import setup_logging
from storefront_admin.services.catalog_client import CatalogClient

setup_logging(level=settings.log_level or logging.INFO)
log = logging.getLogger("storefront_admin")


def _cors_origins_list() -> list[str]:
    if not settings.cors_origins or settings.cors_origins.strip() == "*":
        return ["*"]
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.catalog_client = CatalogClient.from_settings(settings)
    log.info(
        "Catalog API: %s (token: %s, timeout: %ss)",
        settings.catalog_api_url or "-",
        "yes" if settings.catalog_api_token else "no",
        settings.catalog_timeout_seconds,
    )
    yield


app = FastAPI(
    title="Storefront Admin API",
    description="Mağaza yönetim paneli: voucher yaşam döngüsü ve indirim doğrulama",
    lifespan=lifespan,
)
app.state.limiter = limiter


def _error_response(request: Request, status_code: int, message: str, **extra) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = {"error": message, "status_code": status_code, **extra}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=status_code, content=body)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    log.warning("Rate limit exceeded: path=%s detail=%s", request.url.path, exc.detail)
    return _error_response(request, 429, "Too many requests", detail=str(exc.detail))


app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)


def _jsonable_errors(errs) -> list[dict]:
    """Pydantic hata listesinden JSON'a çevrilemeyebilecek 'ctx' / 'input' alanlarını atar."""
    out = []
    for e in errs:
        item = {k: v for k, v in e.items() if k not in ("ctx", "input", "url")}
        item["loc"] = [str(p) for p in e.get("loc") or []]
        out.append(item)
    return out


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errs = exc.errors()
    log.info(
        "Request validation error (422): path=%s method=%s detail=%s",
        request.url.path,
        request.method,
        errs,
    )
    first = errs[0] if errs else {}
    message = first.get("msg") or "Invalid request"
    return _error_response(request, 422, message, detail=_jsonable_errors(errs))


@app.exception_handler(CatalogError)
def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    # Sunucu mesajı aynen; yoksa kategori varsayılanı (CatalogError içinde seçilir)
    log.warning("Catalog error: path=%s category=%s status=%s", request.url.path, exc.category, exc.status_code)
    return _error_response(request, exc.response_status(), exc.message, error_category=exc.category)


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail if isinstance(exc.detail, str) else str(exc.detail))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception: path=%s %s", request.url.path, exc, exc_info=True)
    return _error_response(request, 500, "Unexpected server error")


@app.middleware("http")
async def request_id_and_latency(request: Request, call_next):
    request.state.request_id = str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = request.state.request_id
    log.info(
        "request_id=%s method=%s path=%s status=%s latency_ms=%.2f",
        request.state.request_id,
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(admin_router)


@app.get("/health")
def health():
    return {"status": "ok", "catalog_configured": is_catalog_configured(), "environment": settings.environment}
