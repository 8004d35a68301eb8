# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI - generate 命令

根据提示词生成文本，默认以流式方式输出。
"""

from typing import Optional

import typer

from ollama_async.client import AsyncClient
from ollama_async.commands.common import CONFIG_OPTION, HOST_OPTION, run_with_client
from ollama_async.streaming.stream import MessageStream


def generate(
    model: str = typer.Argument(..., help="模型名称"),
    prompt: str = typer.Argument(..., help="提示词"),
    system: Optional[str] = typer.Option(None, help="系统提示词"),
    stream: bool = typer.Option(True, "--stream/--no-stream", help="是否流式输出"),
    host: Optional[str] = HOST_OPTION,
    config: Optional[str] = CONFIG_OPTION,
):
    """
    生成文本。
    """

    async def action(client: AsyncClient) -> None:
        result = await client.generate(model=model, prompt=prompt, system=system, stream=stream)
        if isinstance(result, MessageStream):
            async with result:
                async for message in result:
                    typer.echo(message.get("response", ""), nl=False)
            typer.echo()
        else:
            typer.echo(result.get("response", ""))

    run_with_client(host, config, action)
