from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import get_settings
from .dependencies import get_portfolio_store
from .exceptions import PortfolioError
from .routers import portfolio_router, system_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.storage_backend.lower() == "database":
        from .database import init_db
        await init_db()
    logger.info(f"✅ {settings.app_name} started with {settings.storage_backend} storage")
    yield
    # Shutdown
    await get_portfolio_store().close()


app = FastAPI(
    title=settings.app_name,
    description="Resume to shareable portfolio generator",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,  # Disable docs in production
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware - uses origins from environment variable
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


# Cache control middleware - prevents browser caching of API responses
class NoCacheMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # Shared portfolio pages set their own caching headers
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

app.add_middleware(NoCacheMiddleware)


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} malformed body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Malformed request body."})


# Include routers
app.include_router(system_router)
app.include_router(portfolio_router)


def run():
    import uvicorn

    uvicorn.run("portfolioforge.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
