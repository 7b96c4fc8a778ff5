import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from vitae.api.v1.health import router as health_router
from vitae.api.v1.resumes import router as resumes_router
from vitae.api.v1.tools import router as tools_router
from vitae.core.config import settings
from vitae.core.container import Services
from vitae.core.cors import cors_allowed_origins
from vitae.core.lifespan import lifespan
from vitae.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(title="Vitae Resume Tailoring API", version="0.1.0", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allowed_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(health_router, prefix="/v1", tags=["Health"])
    app.include_router(resumes_router, prefix="/v1", tags=["Resumes"])
    app.include_router(tools_router, prefix="/v1", tags=["Tools"])
    return app


app = create_app()
