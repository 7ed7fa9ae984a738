"""
Unit tests for the byte source, scratch buffer, codec and value handlers.
"""

import builtins
import io
import struct
from unittest.mock import patch

import pytest

from pybfbin.binary import (
    BoolHandler,
    ByteSource,
    ScalarCodec,
    ScratchBuffer,
    StringHandler,
    Uint64Handler,
    ValueHandlerRegistry,
)
from pybfbin.config import ParsingConfig
from pybfbin.constants import ColumnType
from pybfbin.exceptions import (
    BfbinAllocationError,
    BfbinInternalError,
    BfbinIOError,
    BfbinTruncatedInputError,
)


def make_codec(data: bytes) -> ScalarCodec:
    source = ByteSource(io.BytesIO(data)).open()
    return ScalarCodec(source, ScratchBuffer())


class TestByteSource:
    """Test ByteSource reads and failures."""

    def test_read_exact_from_path(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"abcdef")

        with ByteSource(path) as source:
            assert source.read_exact(2) == b"ab"
            assert source.tell() == 2
            assert source.read_exact(4) == b"cdef"
            assert source.tell() == 6

    def test_open_missing_file_raises_io_error(self, tmp_path):
        source = ByteSource(tmp_path / "missing.bin")
        with pytest.raises(BfbinIOError, match="Failed to open"):
            source.open()
        assert not source.is_open

    def test_short_read_reports_offset(self):
        source = ByteSource(io.BytesIO(b"abc")).open()
        source.read_exact(2)

        with pytest.raises(BfbinTruncatedInputError) as excinfo:
            source.read_exact(4)

        assert excinfo.value.offset == 2
        assert excinfo.value.reason == "unexpected end of file"
        assert "position 2" in str(excinfo.value)

    def test_os_error_text_is_carried(self):
        class FailingStream(io.RawIOBase):
            def readable(self):
                return True

            def readinto(self, b):
                raise OSError(5, "Input/output error")

        source = ByteSource(FailingStream()).open()
        with pytest.raises(BfbinTruncatedInputError) as excinfo:
            source.read_exact(1)
        assert excinfo.value.reason == "Input/output error"

    def test_handles_partial_reads(self):
        class TrickleStream(io.RawIOBase):
            def __init__(self, data):
                self._data = data

            def readable(self):
                return True

            def readinto(self, b):
                if not self._data:
                    return 0
                b[0] = self._data[0]
                self._data = self._data[1:]
                return 1

        source = ByteSource(TrickleStream(b"xyz")).open()
        assert source.read_exact(3) == b"xyz"

    def test_degrades_to_unbuffered_when_buffer_allocation_fails(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"hello")
        real_open = builtins.open
        buffering_seen = []

        def fake_open(name, mode="r", buffering=-1):
            buffering_seen.append(buffering)
            if buffering > 0:
                raise MemoryError
            return real_open(name, mode, buffering=buffering)

        with patch("builtins.open", side_effect=fake_open):
            source = ByteSource(path, buffer_size=1 << 20).open()

        try:
            assert buffering_seen == [1 << 20, 0]
            assert source.read_exact(5) == b"hello"
        finally:
            source.close()

    def test_reads_stream_without_readinto(self):
        class ReadOnlyStream:
            def __init__(self, data):
                self._data = io.BytesIO(data)

            def read(self, n=-1):
                return self._data.read(n)

        source = ByteSource(ReadOnlyStream(b"abcdef")).open()
        assert source.read_exact(4) == b"abcd"
        with pytest.raises(BfbinTruncatedInputError) as excinfo:
            source.read_exact(3)
        assert excinfo.value.offset == 4

    def test_does_not_close_borrowed_stream(self):
        stream = io.BytesIO(b"data")
        with ByteSource(stream) as source:
            source.read_exact(1)
        assert not stream.closed

    def test_close_is_idempotent(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"x")
        source = ByteSource(path).open()
        source.close()
        source.close()
        assert not source.is_open


class TestScratchBuffer:
    """Test ScratchBuffer growth."""

    def test_grows_to_requested_size(self):
        scratch = ScratchBuffer(8)
        scratch.ensure_capacity(100)
        assert scratch.capacity >= 100

    def test_doubles_for_small_growth(self):
        scratch = ScratchBuffer(8)
        scratch.ensure_capacity(9)
        assert scratch.capacity == 16

    def test_never_shrinks(self):
        scratch = ScratchBuffer(8)
        scratch.ensure_capacity(64)
        scratch.ensure_capacity(4)
        assert scratch.capacity == 64

    def test_view_has_exact_length(self):
        scratch = ScratchBuffer(4)
        assert len(scratch.view(10)) == 10
        assert len(scratch.view(0)) == 0

    def test_allocation_failure(self):
        scratch = ScratchBuffer(8)
        with patch("pybfbin.binary.buffer.bytearray", side_effect=MemoryError, create=True):
            with pytest.raises(BfbinAllocationError, match="Failed to allocate 100 bytes"):
                scratch.ensure_capacity(100)
        assert scratch.capacity == 8

    def test_release(self):
        scratch = ScratchBuffer(8)
        scratch.release()
        assert scratch.capacity == 0


class TestScalarCodec:
    """Test big-endian scalar and string decoding."""

    @pytest.mark.parametrize(
        "width, fmt, value",
        [(1, ">B", 0xAB), (2, ">H", 0xABCD), (4, ">I", 0xDEADBEEF), (8, ">Q", 2**64 - 1)],
    )
    def test_read_uint(self, width, fmt, value):
        codec = make_codec(struct.pack(fmt, value))
        assert codec.read_uint(width) == value

    def test_read_uint_is_big_endian(self):
        codec = make_codec(b"\x00\x00\x00\x00\x00\x00\x00\x2a")
        assert codec.read_uint(8) == 42

    def test_read_uint_rejects_unknown_width(self):
        codec = make_codec(b"\x00" * 8)
        with pytest.raises(BfbinInternalError):
            codec.read_uint(3)

    def test_read_uint_short(self):
        codec = make_codec(b"\x00\x01")
        with pytest.raises(BfbinTruncatedInputError):
            codec.read_uint(4)

    def test_read_string(self):
        codec = make_codec(b"\x00\x05Count")
        assert bytes(codec.read_string()) == b"Count"

    def test_read_empty_string(self):
        codec = make_codec(b"\x00\x00")
        assert bytes(codec.read_string()) == b""

    def test_read_string_preserves_embedded_nul(self):
        codec = make_codec(b"\x00\x03a\x00b")
        assert bytes(codec.read_string()) == b"a\x00b"

    def test_read_string_short_prefix(self):
        codec = make_codec(b"\x00")
        with pytest.raises(BfbinTruncatedInputError):
            codec.read_string()

    def test_read_string_short_payload(self):
        codec = make_codec(b"\x00\x05Cou")
        with pytest.raises(BfbinTruncatedInputError, match="5-byte string"):
            codec.read_string()

    def test_read_string_reuses_scratch(self):
        codec = make_codec(b"\x00\x20" + b"x" * 32 + b"\x00\x04abcd")
        codec.read_string()
        capacity = codec.scratch.capacity
        assert bytes(codec.read_string()) == b"abcd"
        assert codec.scratch.capacity == capacity

    def test_read_max_length_string(self):
        codec = make_codec(b"\xff\xff" + b"z" * 65535)
        assert len(codec.read_string()) == 65535

    def test_read_text_decodes(self):
        codec = make_codec(b"\x00\x02\xc3\xa9")
        assert codec.read_text() == "é"

    def test_read_text_replaces_invalid_bytes(self):
        codec = make_codec(b"\x00\x01\xff")
        assert codec.read_text("utf-8", "replace") == "\ufffd"

    @pytest.mark.parametrize("raw, expected", [(0, False), (1, True), (2, True), (255, True)])
    def test_read_bool_nonzero_is_true(self, raw, expected):
        codec = make_codec(bytes([raw]))
        assert codec.read_bool() is expected


class TestValueHandlerRegistry:
    """Test value handler lookup."""

    def test_default_handlers(self):
        registry = ValueHandlerRegistry()
        assert isinstance(registry.lookup(ColumnType.UINT64), Uint64Handler)
        assert isinstance(registry.lookup(ColumnType.STRING), StringHandler)
        assert isinstance(registry.lookup(ColumnType.BOOL), BoolHandler)

    def test_unknown_type(self):
        registry = ValueHandlerRegistry()
        with pytest.raises(BfbinInternalError, match="Unknown column type 9 at position 12"):
            registry.lookup(9, 12)

    def test_terminator_has_no_handler(self):
        registry = ValueHandlerRegistry()
        with pytest.raises(BfbinInternalError):
            registry.lookup(ColumnType.NONE)

    def test_register_custom_handler(self):
        class FixedHandler:
            column_event = "on_column_uint64"
            data_event = "on_data_uint64"

            def can_handle(self, column_type):
                return column_type == 7

            def read(self, codec, config):
                return codec.read_uint(2)

        registry = ValueHandlerRegistry()
        registry.register(FixedHandler())
        handler = registry.lookup(7)
        assert handler.read(make_codec(b"\x01\x00"), ParsingConfig()) == 256

    def test_string_handler_uses_config_encoding(self):
        handler = StringHandler()
        codec = make_codec(b"\x00\x01\xe9")
        assert handler.read(codec, ParsingConfig(string_encoding="latin-1")) == "é"
