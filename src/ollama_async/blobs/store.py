# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import httpx
from aiofiles import os as aio_os

from ollama_async.blobs.hashing import compute_file_sha256, read_file_chunks
from ollama_async.constants import (
    CHUNK_SIZE,
    CONTENT_TYPE_OCTET_STREAM,
    HEADER_CONTENT_TYPE,
    MESSAGES,
)
from ollama_async.streaming.cancellation import CancellationToken
from ollama_async.types import BlobDigest, FileReference
from ollama_async.utils.http_utils import is_success, raise_for_response
from ollama_async.utils.logging import build_logger

logger = build_logger("ollama_async.blobs.store", "ollama_async_blobs.log")


def blob_path(digest: BlobDigest) -> str:
    return f"/api/blobs/{digest}"


class BlobStore:
    """Content-addressed blob storage of the inference server."""

    def __init__(self, client: httpx.AsyncClient, chunk_size: int = CHUNK_SIZE) -> None:
        self._client = client
        self._chunk_size = chunk_size

    async def exists(
        self,
        digest: BlobDigest,
        token: CancellationToken,
    ) -> bool:
        """
        Probes for a blob with a HEAD request.

        Only a 2xx reply means the blob is present. Any other status, and a
        failed connection, count as absent.
        """
        try:
            response = await token.guard(
                self._client.head(blob_path(digest))
            )
        except httpx.TransportError as e:
            logger.debug(f"Blob probe for {digest} failed, treating as absent: {e!r}")
            return False
        return is_success(response.status_code)

    async def upload(
        self,
        path: str,
        digest: BlobDigest,
        token: CancellationToken,
    ) -> None:
        """
        Streams a file to the blob endpoint.

        :raises ResponseError: If the server rejects the upload.
        """
        upload_headers = {
            HEADER_CONTENT_TYPE: CONTENT_TYPE_OCTET_STREAM,
            "Content-Length": str(await aio_os.path.getsize(path)),
        }

        request = self._client.build_request(
            "POST",
            blob_path(digest),
            headers=upload_headers,
            content=read_file_chunks(path, self._chunk_size),
        )
        response = await token.guard(self._client.send(request, stream=True))
        try:
            await raise_for_response(
                response, MESSAGES["UPLOAD_FAILED"].format(status=response.status_code)
            )
        finally:
            await response.aclose()
        logger.info(f"Uploaded {path} as {digest}")

    async def create_blob(
        self,
        reference: FileReference,
        token: CancellationToken,
    ) -> BlobDigest:
        """
        Makes sure the server holds the file's bytes and returns their digest.

        The upload is skipped when the probe finds the blob already present.
        """
        digest = reference.digest
        if digest is None:
            digest = BlobDigest(hex=await compute_file_sha256(reference.path, self._chunk_size))

        if await self.exists(digest, token):
            logger.info(f"Blob {digest} already present, skipping upload of {reference.path}")
            return digest

        await self.upload(reference.path, digest, token)
        return digest
