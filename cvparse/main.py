import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from cvparse.api.routes.parse import router as parse_router
from cvparse.config import load_settings
from cvparse.core.pdf_extractor import create_extractor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings and initialise the PDF extractor once, before serving requests."""
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings
    app.state.extractor = create_extractor(workers=settings.extract_workers)
    logger.info(f"CV parser started (log_level={settings.log_level}, pdf_layout={settings.pdf_layout})")
    yield
    app.state.extractor = None


app = FastAPI(
    title="CV Parser",
    description="Deterministic, rule-based CV parsing service that turns PDF/DOCX/TXT resumes into an editable structured record",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(parse_router)


@app.get("/", tags=["health"])
def root():
    return {"service": "cvparse", "status": "running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="CV Parser API",
        version="0.1.0",
        description="CV parsing API returning a structured record with camelCase field names",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
