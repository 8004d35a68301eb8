"""
Tests for BlobStore in ollama_async/blobs/store.py
"""

import asyncio
import hashlib

import httpx
import pytest

from ollama_async import (
    BlobDigest,
    CancelledRequestError,
    ClientConfig,
    FileReference,
    ResponseError,
)

from fakes import make_client

DIGEST = BlobDigest(hex="ab" * 32)


class FakeBlobServer:
    """Blob endpoint that remembers uploaded digests."""

    def __init__(self, head_status=None, post_status=200, post_body=b""):
        self.blobs = {}
        self.head_status = head_status
        self.post_status = post_status
        self.post_body = post_body

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        digest = request.url.path.rsplit("/", 1)[-1]
        if request.method == "HEAD":
            if self.head_status is not None:
                return httpx.Response(self.head_status)
            return httpx.Response(200 if digest in self.blobs else 404)
        if request.method == "POST":
            if self.post_status >= 300:
                return httpx.Response(self.post_status, content=self.post_body)
            self.blobs[digest] = await request.aread()
            return httpx.Response(201)
        return httpx.Response(405)


class TestExists:
    """Tests for the HEAD probe."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, expected", [(200, True), (204, True), (404, False), (500, False), (307, False)])
    async def test_status(self, status, expected):
        """Test that only 2xx counts as present."""
        client, transport = make_client(FakeBlobServer(head_status=status))
        async with client:
            assert await client.blobs.exists(DIGEST, client.current_token()) is expected
        request = transport.requests[0]
        assert request.method == "HEAD"
        assert request.url.path == f"/api/blobs/sha256:{'ab' * 32}"

    @pytest.mark.asyncio
    async def test_transport_error_means_absent(self):
        """Test that a failed probe connection is treated as absent."""

        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(handler)
        async with client:
            assert await client.blobs.exists(DIGEST, client.current_token()) is False


class TestUpload:
    """Tests for the streamed upload."""

    @pytest.mark.asyncio
    async def test_upload_sends_file_bytes(self, tmp_path):
        """Test the upload request line, headers and body."""
        data = b"gguf-weights" * 1000
        path = tmp_path / "model.gguf"
        path.write_bytes(data)

        server = FakeBlobServer()
        client, transport = make_client(server, config=ClientConfig(chunk_size=1024))
        async with client:
            await client.blobs.upload(str(path), DIGEST, client.current_token())

        request = transport.calls("POST")[0]
        assert request.url.path == f"/api/blobs/{DIGEST}"
        assert request.headers["Content-Type"] == "application/octet-stream"
        assert request.headers["Content-Length"] == str(len(data))
        assert server.blobs[str(DIGEST)] == data

    @pytest.mark.asyncio
    async def test_upload_error_message(self, tmp_path):
        """Test that the server's error text is reported."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"x")
        client, _ = make_client(
            FakeBlobServer(post_status=507, post_body=b'{"error":"Storage full"}')
        )
        async with client:
            with pytest.raises(ResponseError) as exc_info:
                await client.blobs.upload(str(path), DIGEST, client.current_token())
        assert exc_info.value.error == "Storage full"
        assert exc_info.value.status_code == 507

    @pytest.mark.asyncio
    async def test_upload_generic_error(self, tmp_path):
        """Test the fallback message when the server gives no error text."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"x")
        client, _ = make_client(FakeBlobServer(post_status=500))
        async with client:
            with pytest.raises(ResponseError) as exc_info:
                await client.blobs.upload(str(path), DIGEST, client.current_token())
        assert exc_info.value.error == "upload failed: 500"


class TestCreateBlob:
    """Tests for hash, probe and conditional upload."""

    @pytest.mark.asyncio
    async def test_skips_upload_when_present(self, tmp_path):
        """Test that a 200 probe means no upload."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"weights")
        client, transport = make_client(FakeBlobServer(head_status=200))
        async with client:
            digest = await client.blobs.create_blob(FileReference(str(path)), client.current_token())
        assert digest.hex == hashlib.sha256(b"weights").hexdigest()
        assert [r.method for r in transport.requests] == ["HEAD"]

    @pytest.mark.asyncio
    async def test_uploads_when_absent(self, tmp_path):
        """Test that a 404 probe is followed by exactly one upload."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"weights")
        server = FakeBlobServer()
        client, transport = make_client(server)
        async with client:
            digest = await client.blobs.create_blob(FileReference(str(path)), client.current_token())
        assert [r.method for r in transport.requests] == ["HEAD", "POST"]
        assert server.blobs[str(digest)] == b"weights"

    @pytest.mark.asyncio
    async def test_deduplicates_uploads(self, tmp_path):
        """Test that the same content is uploaded once across two calls."""
        first = tmp_path / "a.gguf"
        second = tmp_path / "b.gguf"
        first.write_bytes(b"same bytes")
        second.write_bytes(b"same bytes")
        client, transport = make_client(FakeBlobServer())
        async with client:
            token = client.current_token()
            one = await client.blobs.create_blob(FileReference(str(first)), token)
            two = await client.blobs.create_blob(FileReference(str(second)), token)
        assert one == two
        assert len(transport.calls("HEAD")) == 2
        assert len(transport.calls("POST")) == 1

    @pytest.mark.asyncio
    async def test_probe_failure_falls_back_to_upload(self, tmp_path):
        """Test that a probe transport error still uploads the file."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"weights")
        server = FakeBlobServer()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "HEAD":
                raise httpx.ConnectError("reset", request=request)
            return await server(request)

        client, transport = make_client(handler)
        async with client:
            await client.blobs.create_blob(FileReference(str(path)), client.current_token())
        assert len(transport.calls("POST")) == 1

    @pytest.mark.asyncio
    async def test_supplied_digest_is_not_recomputed(self, tmp_path):
        """Test that a caller-supplied sha256 is used as given."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"weights")
        client, transport = make_client(FakeBlobServer(head_status=200))
        reference = FileReference(str(path), sha256="SHA256:" + "CD" * 32)
        async with client:
            digest = await client.blobs.create_blob(reference, client.current_token())
        assert str(digest) == "sha256:" + "cd" * 32
        assert transport.requests[0].url.path == f"/api/blobs/sha256:{'cd' * 32}"


class TestUploadCancellation:
    """Tests for uploads under a cancelled token."""

    @pytest.mark.asyncio
    async def test_abort_during_upload(self, tmp_path):
        """Test that abort ends an upload the server has not answered yet."""
        path = tmp_path / "model.gguf"
        path.write_bytes(b"weights")
        started = asyncio.Event()
        never = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await never.wait()
            return httpx.Response(201)

        client, _ = make_client(handler)
        async with client:
            pending = asyncio.ensure_future(
                client.blobs.upload(str(path), DIGEST, client.current_token())
            )
            await asyncio.wait_for(started.wait(), timeout=1)
            client.abort()
            with pytest.raises(CancelledRequestError):
                await asyncio.wait_for(pending, timeout=1)
