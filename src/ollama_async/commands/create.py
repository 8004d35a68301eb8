# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI - create 命令

从本地模型文件或 Modelfile 创建模型。本地文件先按内容哈希上传，
服务器上已存在的 blob 会被跳过。
"""

from typing import List, Optional

import typer

from ollama_async.client import AsyncClient
from ollama_async.commands.common import (
    CONFIG_OPTION,
    HOST_OPTION,
    print_progress,
    run_with_client,
)


def create(
    model: str = typer.Argument(..., help="要创建的模型名称"),
    file: Optional[List[str]] = typer.Option(None, "--file", "-f", help="要上传的本地模型文件，可重复"),
    modelfile: Optional[str] = typer.Option(None, "--modelfile", "-m", help="Modelfile 路径"),
    from_: Optional[str] = typer.Option(None, "--from", help="基础模型名称或本地模型文件"),
    quantize: Optional[str] = typer.Option(None, help="量化类型，例如 q4_K_M"),
    host: Optional[str] = HOST_OPTION,
    config: Optional[str] = CONFIG_OPTION,
):
    """
    创建模型。
    """

    async def action(client: AsyncClient) -> None:
        result = await client.create(
            model=model,
            from_=from_,
            files=file or None,
            path=modelfile,
            quantize=quantize,
            stream=True,
        )
        await print_progress(result)

    run_with_client(host, config, action)
