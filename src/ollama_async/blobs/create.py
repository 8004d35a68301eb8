# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import os
from typing import Any, Dict, List, Optional, Sequence

import aiofiles

from ollama_async.blobs.hashing import is_file
from ollama_async.blobs.modelfile import (
    create_blob_file_map,
    replace_modelfile_paths_with_blobs,
    resolve_modelfile_commands,
)
from ollama_async.blobs.store import BlobStore
from ollama_async.constants import MESSAGES
from ollama_async.errors import ValidationError
from ollama_async.streaming.cancellation import CancellationToken
from ollama_async.types import FileReference
from ollama_async.utils.logging import build_logger

logger = build_logger("ollama_async.blobs.create", "ollama_async_blobs.log")


async def _collect_file_references(
    from_: Optional[str], files: Optional[Sequence[Any]]
) -> List[FileReference]:
    references: List[FileReference] = []
    if files is not None:
        if len(files) == 0:
            raise ValidationError(MESSAGES["NO_FILES"])
        references = [FileReference.from_value(item) for item in files]

    # A base that names a local file is uploaded like any declared file.
    if from_ is not None and await is_file(from_):
        if all(os.path.abspath(r.path) != os.path.abspath(from_) for r in references):
            references.insert(0, FileReference(path=from_))

    for reference in references:
        if not await is_file(reference.path):
            raise ValidationError(MESSAGES["FILE_NOT_FOUND"].format(path=reference.path))
    return references


async def _read_modelfile(path: str) -> str:
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return await f.read()


async def prepare_create_request(
    store: BlobStore,
    token: CancellationToken,
    model: str,
    from_: Optional[str] = None,
    files: Optional[Sequence[Any]] = None,
    modelfile: Optional[str] = None,
    path: Optional[str] = None,
    **fields: Any,
) -> Dict[str, Any]:
    """
    Builds the body of a create request, uploading local files first.

    Every local check runs before the first request, so a validation error
    means nothing was sent.

    :param store: Blob storage used for probing and uploading.
    :param token: Cancellation token of the create call.
    :param model: Name of the model to create.
    :param from_: Base model name, or a path to a local model file.
    :param files: Local files to upload, as paths, ``FileReference`` objects
        or ``{"filepath": ..., "sha256": ...}`` mappings.
    :param modelfile: Modelfile text.
    :param path: Path to a Modelfile; when given it is read and wins over
        ``modelfile``.
    :return: The JSON body for ``/api/create``.
    :raises ValidationError: If the request names no source or a missing file.
    """
    if from_ is None and files is None and modelfile is None and path is None:
        raise ValidationError(MESSAGES["NO_MODEL_SOURCE"])

    references = await _collect_file_references(from_, files)

    modelfile_dir = os.getcwd()
    if path is not None:
        modelfile = await _read_modelfile(path)
        modelfile_dir = os.path.dirname(os.path.abspath(path))

    async def create_blob(reference: FileReference):
        return await store.create_blob(reference, token)

    body: Dict[str, Any] = {"model": model}
    if references:
        digests = [await create_blob(reference) for reference in references]
        body["files"] = create_blob_file_map(references, digests)
        if modelfile is not None:
            modelfile = replace_modelfile_paths_with_blobs(modelfile, digests)
        logger.info(f"Resolved {len(digests)} file(s) for model {model}")
    elif modelfile is not None:
        modelfile = await resolve_modelfile_commands(modelfile, modelfile_dir, create_blob)

    if from_ is not None and not any(
        os.path.abspath(r.path) == os.path.abspath(from_) for r in references
    ):
        body["from"] = from_
    if modelfile is not None:
        body["modelfile"] = modelfile
    body.update(fields)
    return body
