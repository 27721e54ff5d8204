# chaoscrypt/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)

from chaoscrypt.api.v1.api import api_router
from chaoscrypt.api.v1.dependencies import get_server_key
from chaoscrypt.core import config
from chaoscrypt.core.errors import KeyLoadError
from chaoscrypt.core.limiter import limiter, log_rate_limit_violation
from chaoscrypt.core.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    if config.KEY_FILE:
        # Surface a broken key file at startup rather than on the first request
        try:
            get_server_key()
        except KeyLoadError as e:
            logger.error(f"Server key not loaded: {e}")
    else:
        logger.info("No server key configured; requests must carry their own key")

    yield  # ----- Application running -----

    get_server_key.cache_clear()


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    log_rate_limit_violation(request, str(exc.detail))
    return _rate_limit_exceeded_handler(request, exc)


app = FastAPI(
    title="chaoscrypt - Text Dependent Encryption",
    description="Chaos-based symmetric cipher driven by a coupled map network.",
    version="1.0.0",
    lifespan=lifespan,
    exception_handlers={RateLimitExceeded: rate_limit_handler},
    docs_url="/docs" if not config.IS_PRODUCTION else None,  # Disable docs in production
    redoc_url="/redoc" if not config.IS_PRODUCTION else None
)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# Include the API router
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    """Liveness probe with the active scheme parameters (never key material)."""
    return {
        "status": "ok",
        "local_map": config.LOCAL_MAP,
        "encoding": config.ENCODING,
        "perturb": config.PERTURB,
        "server_key": bool(config.KEY_FILE),
    }
