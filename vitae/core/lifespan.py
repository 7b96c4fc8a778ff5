from contextlib import asynccontextmanager
import logging

from vitae.core.config import settings
from vitae.core.container import build_default_services
from vitae.core.template_catalog import load_template_catalog

logger = logging.getLogger(__name__)

CACHE_DRAIN_TIMEOUT_S = 10.0


@asynccontextmanager
async def lifespan(app):
    load_template_catalog()

    owns_services = getattr(app.state, "services", None) is None
    if owns_services:
        app.state.services = build_default_services(settings)

    services = app.state.services
    yield

    await services.delivery.drain(timeout=CACHE_DRAIN_TIMEOUT_S)
    if owns_services:
        await services.aclose()
        app.state.services = None
