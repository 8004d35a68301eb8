# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

VERSION = "0.1.0"

DEFAULT_HOST = "http://127.0.0.1:11434"
DEFAULT_PORT = 11434
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443

CHUNK_SIZE = 64 * 1024

SHA256 = "sha256"

MODEL_FILE_COMMANDS = ["FROM", "ADAPTER"]
MODEL_FILE_EXTENSION = ".gguf"

STATUS_SUCCESS = "success"

HEADER_CONTENT_TYPE = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

MESSAGES = {
    "MISSING_BODY": "Missing body",
    "STREAM_NOT_TERMINATED": "Did not receive done or success response in stream.",
    "EXPECTED_COMPLETED": "Expected a completed response",
    "NO_MODEL_SOURCE": "Must provide either from, files, path or modelfile to create a model",
    "NO_FILES": "At least one file must be specified when using file upload",
    "FILE_NOT_FOUND": "File not found: {path}",
    "MISSING_FILE_PATH": "File entry has no 'filepath': {entry!r}",
    "UPLOAD_FAILED": "upload failed: {status}",
    "REQUEST_CANCELLED": "Request was cancelled",
}
