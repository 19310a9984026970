from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from agrom.api.deps import get_backend
from agrom.api.middleware import AuditMiddleware
from agrom.api.prices import router as update_prices_router
from agrom.api.v1.router import v1_router
from agrom.common.exceptions import (
    AgromException,
    AuthenticationRequiredError,
    NotFoundError,
    ProfileMissingError,
)
from agrom.common.logging import get_logger, setup_logging
from agrom.config import settings
from agrom.integrations.supabase import SupabaseClient
from agrom.web.router import web_router
from agrom.web.templating import BASE_DIR, templates

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Agrom starting (%s), backend at %s", settings.APP_ENV, settings.SUPABASE_URL)
    yield


app = FastAPI(
    title="Agrom API",
    description="Marketplace de servicios agrícolas entre productores y contratistas",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuditMiddleware)

app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")

app.include_router(v1_router, prefix="/api/v1")
app.include_router(update_prices_router)
app.include_router(web_router)


@app.exception_handler(AgromException)
async def agrom_exception_handler(request: Request, exc: AgromException):
    if request.url.path.startswith("/api/"):
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    if isinstance(exc, AuthenticationRequiredError):
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    if isinstance(exc, ProfileMissingError):
        return RedirectResponse(url="/onboarding", status_code=status.HTTP_303_SEE_OTHER)
    if isinstance(exc, NotFoundError):
        return templates.TemplateResponse(
            request, "not_found.html", {"message": exc.detail}, status_code=exc.status_code,
        )
    return templates.TemplateResponse(
        request, "error.html", {"message": exc.detail}, status_code=exc.status_code,
    )


@app.get("/health")
async def health_check(backend: SupabaseClient = Depends(get_backend)):
    return {
        "status": "healthy",
        "service": "agrom",
        "version": "1.0.0",
        "env": settings.APP_ENV,
        "backend": await backend.status(),
    }
