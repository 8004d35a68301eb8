# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from .cancellation import CancellationToken, TokenSource  # noqa: F401
from .decoder import LineDecoder, parse_json_lines  # noqa: F401
from .stream import MessageStream  # noqa: F401
