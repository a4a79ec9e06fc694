# recircle/services/blob_store.py
"""
Blob store backends for listing images.

- LocalBlobStore: writes into MEDIA_ROOT/listings/, served by the app under MEDIA_URL
- HttpBlobStore: PUTs the bytes to an object-storage bucket endpoint
- InMemoryBlobStore: keeps everything in a dict (tests)

Every backend returns a durable URL that is stored verbatim as Listing.image.
"""
import logging
import os
import re
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from recircle.core.constants import ALLOWED_IMAGE_EXTENSIONS
from recircle.services.errors import BlobRejected, BlobUnavailable

logger = logging.getLogger("recircle.blob_store")


def make_image_key(filename: str, now: Optional[float] = None) -> str:
    """
    Collision-resistant key: "<unix millis>_<sanitised original filename>".
    """
    millis = int((time.time() if now is None else now) * 1000)
    base = os.path.basename(filename or "") or "image"
    safe = re.sub(r"[^A-Za-z0-9._-]", "-", base)
    safe = re.sub(r"-+", "-", safe).strip("-") or "image"
    return f"{millis}_{safe}"


def check_image(data: bytes, key: str, max_bytes: int) -> None:
    ext = os.path.splitext(key)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise BlobRejected(f"Unsupported file type: {ext or 'none'}")
    if not data:
        raise BlobRejected("Image file is empty")
    if len(data) > max_bytes:
        raise BlobRejected(f"Image is too large ({len(data)} bytes, max {max_bytes})")


class BlobStore(ABC):
    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes

    def upload(self, data: bytes, key: str) -> str:
        check_image(data, key, self.max_bytes)
        url = self._put(data, key)
        logger.info("blob_store: stored %s (%d bytes)", key, len(data))
        return url

    @abstractmethod
    def _put(self, data: bytes, key: str) -> str:
        ...


class LocalBlobStore(BlobStore):
    def __init__(self, media_root: Path, media_url: str, public_base_url: str = "", max_bytes: int = 5 * 1024 * 1024):
        super().__init__(max_bytes)
        self.root = Path(media_root) / "listings"
        self.media_url = media_url.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/")

    def _put(self, data: bytes, key: str) -> str:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(self.root / key, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.exception("blob_store: could not write %s", key)
            raise BlobUnavailable(f"Could not store image: {e}") from e

        return f"{self.public_base_url}{self.media_url}/listings/{quote(key)}"


class HttpBlobStore(BlobStore):
    """
    Object storage reachable over plain HTTP PUT (S3 presigned-style bucket,
    Firebase/GCS upload endpoint behind a proxy, ...).
    """

    def __init__(
        self,
        upload_url: str,
        public_url: str = "",
        token: str = "",
        max_bytes: int = 5 * 1024 * 1024,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(max_bytes)
        self.upload_url = upload_url.rstrip("/")
        self.public_url = (public_url or upload_url).rstrip("/")
        self.token = token
        self.client = client or httpx.Client(timeout=30.0)

    def _put(self, data: bytes, key: str) -> str:
        headers = {"Content-Type": _content_type_for(key)}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.upload_url}/{quote(key)}"
        try:
            resp = self.client.put(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("blob_store: upload to %s failed: %s", url, e)
            raise BlobUnavailable(f"Image upload failed: {e}") from e

        if resp.status_code in (400, 413, 415):
            raise BlobRejected(f"Image rejected by storage: {resp.status_code} {resp.text}")
        if resp.status_code not in (200, 201, 204):
            raise BlobUnavailable(f"Image upload failed: {resp.status_code} {resp.text}")

        return f"{self.public_url}/{quote(key)}"


class InMemoryBlobStore(BlobStore):
    def __init__(self, base_url: str = "memory://blobs", max_bytes: int = 5 * 1024 * 1024):
        super().__init__(max_bytes)
        self.base_url = base_url.rstrip("/")
        self.blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def _put(self, data: bytes, key: str) -> str:
        with self._lock:
            self.blobs[key] = data
        return f"{self.base_url}/{key}"


def _content_type_for(key: str) -> str:
    ext = os.path.splitext(key)[1].lower()
    return {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".webp": "image/webp",
        ".gif": "image/gif",
    }.get(ext, "application/octet-stream")
