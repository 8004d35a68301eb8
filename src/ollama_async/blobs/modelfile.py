# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
Rewriting of Modelfile text so that local file references point at uploaded
blobs instead.
"""

import os
import re
from typing import Awaitable, Callable, Dict, Sequence, Union

from ollama_async.blobs.hashing import is_file
from ollama_async.constants import MODEL_FILE_COMMANDS, MODEL_FILE_EXTENSION
from ollama_async.types import BlobDigest, FileReference

LOCAL_MODEL_PATH_PATTERN = re.compile(
    r"\./\S+" + re.escape(MODEL_FILE_EXTENSION), re.IGNORECASE
)

DigestLike = Union[BlobDigest, str]


def replace_modelfile_paths_with_blobs(modelfile: str, digests: Sequence[DigestLike]) -> str:
    """
    Replaces local model paths with ``@<digest>`` references.

    Each digest, in order, takes the first ``./<path>.gguf`` reference still
    left in the text. References beyond the number of digests stay as they
    are.

    :param modelfile: The Modelfile text.
    :param digests: One digest per declared file, in declaration order.
    :return: The rewritten text.
    """
    for digest in digests:
        reference = f"@{digest}"
        modelfile = LOCAL_MODEL_PATH_PATTERN.sub(lambda _: reference, modelfile, count=1)
    return modelfile


def create_blob_file_map(
    files: Sequence[FileReference], digests: Sequence[DigestLike]
) -> Dict[str, str]:
    """Maps each declared file's basename to its digest."""
    return {reference.basename: str(digest) for reference, digest in zip(files, digests)}


def resolve_modelfile_path(value: str, modelfile_dir: str) -> str:
    if value.startswith("~"):
        return os.path.join(os.path.expanduser("~"), value[1:].lstrip("/\\"))
    return os.path.abspath(os.path.join(modelfile_dir, value))


async def resolve_modelfile_commands(
    modelfile: str,
    modelfile_dir: str,
    create_blob: Callable[[FileReference], Awaitable[BlobDigest]],
) -> str:
    """
    Uploads the local files named by ``FROM`` and ``ADAPTER`` lines.

    A line whose argument resolves to an existing file becomes
    ``<COMMAND> @<digest>``. Every other line is kept unchanged.

    :param modelfile: The Modelfile text.
    :param modelfile_dir: Directory that relative paths are resolved against.
    :param create_blob: Uploads one file and returns its digest.
    """
    lines = modelfile.split("\n")
    for index, line in enumerate(lines):
        command, _, args = line.partition(" ")
        if command.upper() not in MODEL_FILE_COMMANDS or not args.strip():
            continue
        path = resolve_modelfile_path(args.strip(), modelfile_dir)
        if not await is_file(path):
            continue
        digest = await create_blob(FileReference(path=path))
        lines[index] = f"{command} @{digest}"
    return "\n".join(lines)
