# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import base64
import os
from typing import Any, Dict, List, Optional, Sequence, Union

import aiofiles
from aiofiles import os as aio_os

Image = Union[bytes, bytearray, str, os.PathLike]


async def encode_image(image: Image) -> str:
    """
    Base64 encodes raw bytes or the contents of an existing image file.

    Any other string is assumed to be base64 already and is returned as is.
    """
    if isinstance(image, (bytes, bytearray)):
        return base64.b64encode(bytes(image)).decode("ascii")
    path = os.fspath(image)
    if len(path) < 4096 and await aio_os.path.isfile(path):
        async with aiofiles.open(path, "rb") as f:
            return base64.b64encode(await f.read()).decode("ascii")
    return path


async def encode_images(images: Optional[Sequence[Image]]) -> Optional[List[str]]:
    if images is None:
        return None
    return [await encode_image(image) for image in images]


async def encode_message_images(
    messages: Optional[Sequence[Dict[str, Any]]],
) -> Optional[List[Dict[str, Any]]]:
    if messages is None:
        return None
    encoded = []
    for message in messages:
        message = dict(message)
        if message.get("images"):
            message["images"] = await encode_images(message["images"])
        encoded.append(message)
    return encoded
