# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
Content-addressed upload of local model files.

Files are hashed, probed on the server, uploaded only when missing, and the
Modelfile is rewritten to reference the resulting digests.
"""

from ollama_async.blobs.create import prepare_create_request
from ollama_async.blobs.hashing import compute_file_sha256, is_file, read_file_chunks
from ollama_async.blobs.modelfile import (
    create_blob_file_map,
    replace_modelfile_paths_with_blobs,
    resolve_modelfile_commands,
)
from ollama_async.blobs.store import BlobStore

__all__ = [
    "BlobStore",
    "compute_file_sha256",
    "create_blob_file_map",
    "is_file",
    "prepare_create_request",
    "read_file_chunks",
    "replace_modelfile_paths_with_blobs",
    "resolve_modelfile_commands",
]
