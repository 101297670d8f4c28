"""
Geo Feed API — entry point.

Startup sequence:
  1. Configure OTel tracing (→ Jaeger via OTLP)
  2. Start async HTTP clients (social graph, profile lookup)
  3. Expose Prometheus /metrics endpoint

The post store is owned by the post-management service; this service
only reads from it, so no tables are created at startup.
"""
import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from geofeed.config import settings
from geofeed.telemetry import setup_tracing, instrument_app
from geofeed.clients.profile_client import profile_client
from geofeed.clients.social_graph_client import social_graph_client
from geofeed.routers import feed

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Set up tracing before the app is created so all imports are instrumented
setup_tracing()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup and shutdown of outbound HTTP clients."""
    logger.info("Starting Geo Feed API (env=%s)", settings.environment)

    await social_graph_client.start()
    await profile_client.start()

    logger.info("Clients started. API ready.")
    yield

    logger.info("Shutting down...")
    await social_graph_client.stop()
    await profile_client.stop()


app = FastAPI(
    title="Geo Feed API",
    description=(
        "Location- and social-aware post feed: newest-first, "
        "nearest-first and following feeds over geo-tagged posts."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(feed.router, prefix="/feed", tags=["Feed"])

# ── Observability ──────────────────────────────────────────────────────────
instrument_app(app)
app.mount("/metrics", make_asgi_app())


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "service": settings.service_name}
