import shutil
import tempfile
import unittest
from pathlib import Path

import httpx

from recircle.services.blob_store import (
    HttpBlobStore,
    InMemoryBlobStore,
    LocalBlobStore,
    make_image_key,
)
from recircle.services.errors import BlobRejected, BlobUnavailable


class ImageKeyTests(unittest.TestCase):
    def test_timestamp_and_filename(self):
        self.assertEqual(make_image_key("jacket.jpg", now=1700000000.25), "1700000000250_jacket.jpg")

    def test_sanitises_path_and_odd_characters(self):
        key = make_image_key("../../etc/Grand Mère (1).png", now=1)
        self.assertEqual(key, "1000_Grand-M-re-1-.png")

    def test_blank_filename(self):
        self.assertEqual(make_image_key("", now=2), "2000_image")


class LocalBlobStoreTests(unittest.TestCase):
    def setUp(self):
        self.root = Path(tempfile.mkdtemp())
        self.store = LocalBlobStore(self.root, "/media", public_base_url="https://recircle.example.com/", max_bytes=10)

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_writes_file_and_returns_public_url(self):
        url = self.store.upload(b"png-bytes", "1_lamp.png")

        self.assertEqual(url, "https://recircle.example.com/media/listings/1_lamp.png")
        self.assertEqual((self.root / "listings" / "1_lamp.png").read_bytes(), b"png-bytes")

    def test_rejects_large_file(self):
        with self.assertRaises(BlobRejected):
            self.store.upload(b"x" * 11, "1_big.png")

    def test_rejects_unknown_extension(self):
        with self.assertRaises(BlobRejected):
            self.store.upload(b"data", "1_notes.txt")

    def test_rejects_empty_file(self):
        with self.assertRaises(BlobRejected):
            self.store.upload(b"", "1_empty.png")

    def test_rejection_is_a_blob_failure(self):
        self.assertTrue(issubclass(BlobRejected, BlobUnavailable))


class HttpBlobStoreTests(unittest.TestCase):
    def _store(self, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpBlobStore(
            upload_url="https://storage.example.com/upload/",
            public_url="https://cdn.example.com/",
            token="secret",
            client=client,
        )

    def test_put_with_auth_and_content_type(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["type"] = request.headers.get("Content-Type")
            seen["body"] = request.content
            return httpx.Response(201)

        url = self._store(handler).upload(b"jpeg", "5_bike.jpg")

        self.assertEqual(url, "https://cdn.example.com/5_bike.jpg")
        self.assertEqual(seen["method"], "PUT")
        self.assertEqual(seen["url"], "https://storage.example.com/upload/5_bike.jpg")
        self.assertEqual(seen["auth"], "Bearer secret")
        self.assertEqual(seen["type"], "image/jpeg")
        self.assertEqual(seen["body"], b"jpeg")

    def test_server_error_is_unavailable(self):
        store = self._store(lambda request: httpx.Response(500, text="boom"))
        with self.assertRaises(BlobUnavailable) as ctx:
            store.upload(b"jpeg", "5_bike.jpg")
        self.assertNotIsInstance(ctx.exception, BlobRejected)

    def test_too_large_response_is_rejection(self):
        store = self._store(lambda request: httpx.Response(413))
        with self.assertRaises(BlobRejected):
            store.upload(b"jpeg", "5_bike.jpg")

    def test_transport_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(BlobUnavailable):
            self._store(handler).upload(b"jpeg", "5_bike.jpg")


class InMemoryBlobStoreTests(unittest.TestCase):
    def test_keeps_bytes(self):
        store = InMemoryBlobStore()
        self.assertEqual(store.upload(b"gif", "1_a.gif"), "memory://blobs/1_a.gif")
        self.assertEqual(store.blobs["1_a.gif"], b"gif")
