"""
Unit tests for LineDecoder and parse_json_lines in ollama_async/streaming/decoder.py
"""

import json
import logging

import pytest

from ollama_async.streaming.decoder import LineDecoder, parse_json_lines

from fakes import iterate, ndjson


async def collect(chunks):
    return [message async for message in parse_json_lines(iterate(chunks))]


class TestLineDecoder:
    """Tests for the LineDecoder state object."""

    def test_complete_lines(self):
        """Test that complete lines are returned and the remainder is kept."""
        decoder = LineDecoder()
        assert decoder.feed(b'{"a":1}\n{"b":2}\n{"c"') == ['{"a":1}', '{"b":2}']
        assert decoder.feed(b":3}\n") == ['{"c":3}']
        assert decoder.finish() is None

    def test_no_newline_buffers(self):
        """Test that a chunk without a newline yields nothing yet."""
        decoder = LineDecoder()
        assert decoder.feed(b'{"done":') == []
        assert decoder.feed(b"true}") == []
        assert decoder.finish() == '{"done":true}'

    def test_multibyte_character_split_across_chunks(self):
        """Test that a UTF-8 character split between chunks decodes correctly."""
        encoded = '{"response":"héllo 世界"}\n'.encode("utf-8")
        index = encoded.index("世".encode("utf-8")) + 1
        decoder = LineDecoder()
        assert decoder.feed(encoded[:index]) == []
        assert decoder.feed(encoded[index:]) == ['{"response":"héllo 世界"}']

    def test_every_byte_separately(self):
        """Test feeding one byte at a time."""
        encoded = '{"x":"ü"}\n{"y":2}'.encode("utf-8")
        decoder = LineDecoder()
        lines = []
        for i in range(len(encoded)):
            lines.extend(decoder.feed(encoded[i:i + 1]))
        remainder = decoder.finish()
        assert lines == ['{"x":"ü"}']
        assert remainder == '{"y":2}'

    def test_finish_ignores_whitespace_remainder(self):
        """Test that a trailing blank remainder is not returned."""
        decoder = LineDecoder()
        decoder.feed(b'{"a":1}\n  ')
        assert decoder.finish() is None


class TestParseJsonLines:
    """Tests for parse_json_lines."""

    @pytest.mark.asyncio
    async def test_single_chunk(self):
        """Test N lines plus a terminal line in one chunk."""
        data = ndjson({"n": 1}, {"n": 2}, {"n": 3}, {"done": True})
        messages = await collect([data])
        assert messages == [{"n": 1}, {"n": 2}, {"n": 3}, {"done": True}]

    @pytest.mark.asyncio
    async def test_split_after_key(self):
        """Test the two-chunk split after '{"a"'."""
        messages = await collect([b'{"a"', b':1}\n{"done":true}\n'])
        assert messages == [{"a": 1}, {"done": True}]

    @pytest.mark.asyncio
    async def test_resegmentation_gives_same_messages(self):
        """Test that every two-way split of the input yields the same sequence."""
        documents = [{"response": "día"}, {"response": "日本語"}, {"done": True}]
        data = "\n".join(json.dumps(d, ensure_ascii=False) for d in documents).encode("utf-8")
        expected = await collect([data])
        assert len(expected) == 3
        for split in range(1, len(data)):
            assert await collect([data[:split], data[split:]]) == expected

    @pytest.mark.asyncio
    async def test_many_small_chunks(self):
        """Test a stream delivered in three-byte chunks."""
        data = ndjson(*[{"i": i, "text": "ß→"} for i in range(20)], {"done": True})
        chunks = [data[i:i + 3] for i in range(0, len(data), 3)]
        messages = await collect(chunks)
        assert [m.get("i") for m in messages[:-1]] == list(range(20))
        assert messages[-1] == {"done": True}

    @pytest.mark.asyncio
    async def test_trailing_line_without_newline(self):
        """Test that the final document is parsed when no newline follows it."""
        messages = await collect([b'{"a":1}\n{"done":true}'])
        assert messages == [{"a": 1}, {"done": True}]

    @pytest.mark.asyncio
    async def test_invalid_line_is_skipped(self, caplog):
        """Test that malformed JSON is logged and later lines still arrive."""
        caplog.set_level(logging.WARNING, logger="ollama_async.streaming.decoder")
        messages = await collect([b'{"a":1}\nnot json\n{"b":2}\n{"done":true}\n'])
        assert messages == [{"a": 1}, {"b": 2}, {"done": True}]
        assert "not json" in caplog.text

    @pytest.mark.asyncio
    async def test_blank_lines_are_ignored(self):
        """Test that empty and CRLF lines do not produce messages."""
        messages = await collect([b'{"a":1}\r\n\n\n{"done":true}\r\n'])
        assert messages == [{"a": 1}, {"done": True}]

    @pytest.mark.asyncio
    async def test_non_object_document_is_skipped(self):
        """Test that JSON arrays and scalars are dropped."""
        messages = await collect([b'[1,2]\n42\n{"done":true}\n'])
        assert messages == [{"done": True}]

    @pytest.mark.asyncio
    async def test_messages_expose_terminal_markers(self):
        """Test the Message helpers on parsed documents."""
        messages = await collect([ndjson({"status": "pulling"}, {"status": "success"})])
        assert not messages[0].is_terminal
        assert messages[1].is_terminal
        assert messages[1].status == "success"

    @pytest.mark.asyncio
    async def test_empty_input(self):
        """Test that no chunks produce no messages."""
        assert await collect([]) == []
