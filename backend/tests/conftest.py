import os
import tempfile

# Must run before anything imports recircle.core.config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LISTING_STORE", "sql")
os.environ.setdefault("BLOB_STORE", "memory")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="recircle-media-"))
os.environ.setdefault("SEED_DEMO_LISTINGS", "false")
