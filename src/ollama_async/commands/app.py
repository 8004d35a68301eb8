# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""
ollama-async CLI - Command Line Interface for a local inference server

Commands:
- generate: Generate text from a prompt
- pull: Pull a model and show its download progress
- create: Create a model from local files or a Modelfile
- digest: Print the blob digest of a local file
"""

import typer

from ollama_async.commands.create import create
from ollama_async.commands.digest import digest
from ollama_async.commands.generate import generate
from ollama_async.commands.pull import pull

# Create main CLI app with subcommands
app = typer.Typer(
    name="ollama-async",
    help="Async client for a local inference server",
    no_args_is_help=True,
)

# Register commands
app.command()(generate)
app.command()(pull)
app.command()(create)
app.command()(digest)


def main():
    app()


if __name__ == "__main__":
    app()
