"""FastAPI application entry point."""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from boxinventory.config import settings
from boxinventory.routes import boxes, inventory, items, scan, search, tags
from boxinventory.services.repository import InventoryRepository
from boxinventory.stores.factory import build_store

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the inventory once per process; the repository owns it from then on."""
    repository = InventoryRepository(build_store(settings))
    outcome = await repository.load()
    app.state.repository = repository
    app.state.write_lock = asyncio.Lock()
    app.state.load_warning = outcome.warning
    logger.info("%s %s ready with %d boxes", settings.APP_NAME, settings.APP_VERSION, len(outcome.boxes))
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Group items into QR-labelled boxes and search across them",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(inventory.router, prefix="/api")
app.include_router(boxes.router, prefix="/api")
app.include_router(items.router, prefix="/api")
app.include_router(search.router, prefix="/api")
app.include_router(scan.router, prefix="/api")
app.include_router(tags.router, prefix="/api")


@app.get("/")
async def root():
    """Redirect to the API docs."""
    return RedirectResponse(url="/docs")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
