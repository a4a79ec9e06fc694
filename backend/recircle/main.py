import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from recircle.core.config import get_settings
from recircle.core.database import Base, SessionLocal, engine
from recircle.core.deps import memory_listing_store
from recircle.models import listing  # noqa: F401  (registers the table)
from recircle.routers import health, listings, listing_images, session
from recircle.services.errors import StoreUnavailable
from recircle.services.listing_store import SqlListingStore
from recircle.services.seed import seed_demo_listings

# --- Load settings ---
settings = get_settings()

# --- Logging ---
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("recircle")

# --- Create DB tables ---
Base.metadata.create_all(bind=engine)

# --- Create FastAPI app ---
app = FastAPI(title=settings.app_name)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Demo data (opt-in via SEED_DEMO_LISTINGS) ---
@app.on_event("startup")
def seed_demo_data():
    if not settings.seed_demo_listings:
        return

    if settings.listing_store == "memory":
        store = memory_listing_store()
        try:
            seed_demo_listings(store)
        except StoreUnavailable as e:
            logger.warning("startup: could not seed demo listings: %s", e)
        return

    db = SessionLocal()
    try:
        seed_demo_listings(SqlListingStore(db))
    except StoreUnavailable as e:
        logger.warning("startup: could not seed demo listings: %s", e)
    finally:
        db.close()


# --- Routers ---
app.include_router(health.router)
app.include_router(listings.router)
app.include_router(listings.meta_router)
app.include_router(listing_images.router)
app.include_router(session.router)

# --- Static media files (LocalBlobStore uploads) ---
settings.media_root.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.media_url,                          # "/media"
    StaticFiles(directory=settings.media_root),  # ./media
    name="media",
)


# --- Root endpoint ---
@app.get("/")
def root():
    return {"message": f"{settings.app_name} backend is running"}
