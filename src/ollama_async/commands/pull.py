# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI - pull 命令

从模型仓库拉取模型并显示下载进度。
"""

from typing import Optional

import typer

from ollama_async.client import AsyncClient
from ollama_async.commands.common import (
    CONFIG_OPTION,
    HOST_OPTION,
    print_progress,
    run_with_client,
)


def pull(
    model: str = typer.Argument(..., help="模型名称"),
    insecure: bool = typer.Option(False, help="允许不安全的仓库连接"),
    host: Optional[str] = HOST_OPTION,
    config: Optional[str] = CONFIG_OPTION,
):
    """
    拉取模型。
    """

    async def action(client: AsyncClient) -> None:
        await print_progress(await client.pull(model=model, insecure=insecure, stream=True))

    run_with_client(host, config, action)
