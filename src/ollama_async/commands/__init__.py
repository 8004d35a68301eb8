# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
CLI 命令模块

提供以下命令入口:
- generate: 文本生成
- pull: 拉取模型
- create: 从本地文件创建模型
- digest: 计算文件摘要
"""

from ollama_async.commands.app import app, main
from ollama_async.commands.create import create
from ollama_async.commands.digest import digest
from ollama_async.commands.generate import generate
from ollama_async.commands.pull import pull

__all__ = [
    "app",
    "main",
    "create",
    "digest",
    "generate",
    "pull",
]
