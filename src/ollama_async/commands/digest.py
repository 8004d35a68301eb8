# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI - digest 命令

计算本地文件的 blob 摘要，不访问服务器。
"""

import asyncio

import typer

from ollama_async.blobs.hashing import compute_file_sha256
from ollama_async.types import BlobDigest


def digest(
    path: str = typer.Argument(..., help="本地文件路径"),
):
    """
    打印文件的 sha256 摘要。
    """
    try:
        hex_digest = asyncio.run(compute_file_sha256(path))
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(BlobDigest(hex=hex_digest)))
