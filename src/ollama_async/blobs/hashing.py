# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import hashlib
from typing import AsyncGenerator

import aiofiles
from aiofiles import os as aio_os

from ollama_async.constants import CHUNK_SIZE


async def read_file_chunks(path: str, chunk_size: int = CHUNK_SIZE) -> AsyncGenerator[bytes, None]:
    """
    Reads a file in fixed-size chunks.

    :param path: The file to read.
    :param chunk_size: Bytes per chunk.
    """
    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            yield chunk


async def compute_file_sha256(path: str, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Computes the SHA256 of a file without loading it into memory.

    :param path: The file to hash.
    :param chunk_size: Bytes read per step; does not affect the result.
    :return: The hex digest.
    :raises OSError: If the file cannot be opened or read.
    """
    sha256 = hashlib.sha256()
    async for chunk in read_file_chunks(path, chunk_size):
        sha256.update(chunk)
    return sha256.hexdigest()


async def is_file(path: str) -> bool:
    return await aio_os.path.isfile(path)
