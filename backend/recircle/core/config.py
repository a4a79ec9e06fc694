from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

from recircle.core.constants import CURRENT_USER_SELLER, JUST_NOW_LABEL, PLACEHOLDER_IMAGE_URL


class Settings(BaseSettings):
    app_name: str = "ReCircle"
    app_env: str = "dev"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # --- Listing store ---
    listing_store: str = "sql"  # sql, memory
    database_url: str = "sqlite:///./recircle.db"
    seed_demo_listings: bool = False

    # --- Blob store ---
    blob_store: str = "local"  # local, http, memory
    media_root: Path = Path("media")
    media_url: str = "/media"
    public_base_url: str = ""
    object_storage_url: str = ""
    object_storage_token: str = ""
    object_storage_public_url: str = ""
    max_image_bytes: int = 5 * 1024 * 1024

    # --- Listing defaults ---
    placeholder_image_url: str = PLACEHOLDER_IMAGE_URL
    current_user_seller: str = CURRENT_USER_SELLER
    just_now_label: str = JUST_NOW_LABEL
    currency: str = "CHF"

    session_cookie_name: str = "recircle_session"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
