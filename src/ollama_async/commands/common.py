# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI 命令的公共工具函数。
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import typer

from ollama_async.client import AsyncClient, StreamResult
from ollama_async.configs import ClientConfig
from ollama_async.errors import OllamaError
from ollama_async.streaming.stream import MessageStream
from ollama_async.types import Message

T = TypeVar("T")

HOST_OPTION = typer.Option(None, "--host", help="推理服务地址，默认读取 OLLAMA_HOST")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="TOML 配置文件路径")


def build_client(host: Optional[str], config_path: Optional[str]) -> AsyncClient:
    """
    根据命令行参数创建客户端。

    Args:
        host: 命令行指定的服务地址，优先于配置文件
        config_path: TOML 配置文件路径

    Returns:
        AsyncClient: 客户端实例
    """
    config = ClientConfig.from_toml(config_path)
    return AsyncClient(host=host, config=config)


def run_with_client(
    host: Optional[str],
    config_path: Optional[str],
    action: Callable[[AsyncClient], Awaitable[T]],
) -> T:
    """在事件循环中执行操作，并把客户端错误转换为非零退出码。"""

    async def runner() -> T:
        async with build_client(host, config_path) as client:
            return await action(client)

    try:
        return asyncio.run(runner())
    except OllamaError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def format_progress(message: Message) -> str:
    """把进度消息格式化为一行文本。"""
    line = message.status or ""
    if message.digest:
        line = f"{line} {message.digest[:19]}"
    if message.total:
        completed = message.completed or 0
        line = f"{line} {completed}/{message.total} ({completed * 100 // message.total}%)"
    return line.strip()


async def print_progress(result: StreamResult) -> Message:
    """逐条打印流式进度，返回最后一条消息。"""
    if not isinstance(result, MessageStream):
        typer.echo(format_progress(result))
        return result
    last = Message()
    async with result:
        async for message in result:
            typer.echo(format_progress(message))
            last = message
    return last
