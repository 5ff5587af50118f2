"""Tests for mslnk.header."""

import struct
import warnings
from datetime import datetime, timezone

import pytest

from mslnk._constants import LINK_CLSID
from mslnk.errors import ParseError, TruncatedDataError
from mslnk.flags import (
    FileAttributeFlags,
    HotkeyFlags,
    HotkeyModifiers,
    LinkFlags,
    ShowCommand,
)
from mslnk.header import ShellLinkHeader, filetime_to_datetime, to_filetime


class TestHeaderLayout:
    """Verify the 76-byte header is well-formed."""

    def test_default_header(self):
        data = ShellLinkHeader().to_bytes()
        assert len(data) == 76
        assert struct.unpack_from("<I", data, 0)[0] == 0x4C
        assert data[4:20] == LINK_CLSID
        assert struct.unpack_from("<I", data, 20)[0] == 0x80
        assert struct.unpack_from("<I", data, 60)[0] == 1
        assert data[28:52] == b"\x00" * 24
        assert data[66:76] == b"\x00" * 10

    def test_field_offsets(self):
        hdr = ShellLinkHeader(
            file_attributes=FileAttributeFlags.ARCHIVE,
            creation_time=1,
            access_time=2,
            write_time=3,
            file_size=1234,
            icon_index=-5,
            show_command=ShowCommand.MIN_NO_ACTIVE,
            hotkey=HotkeyFlags(0x70, HotkeyModifiers.ALT),
        )
        data = hdr.to_bytes()
        assert struct.unpack_from("<I", data, 24)[0] == 0x20
        assert struct.unpack_from("<QQQ", data, 28) == (1, 2, 3)
        assert struct.unpack_from("<I", data, 52)[0] == 1234
        assert struct.unpack_from("<i", data, 56)[0] == -5
        assert struct.unpack_from("<I", data, 60)[0] == 7
        assert data[64] == 0x70
        assert data[65] == 0x04

    def test_round_trip(self):
        hdr = ShellLinkHeader(
            link_flags=LinkFlags.IS_UNICODE | LinkFlags.HAS_NAME,
            creation_time=132_000_000_000_000_000,
            file_size=99,
            icon_index=3,
            show_command=ShowCommand.MAXIMIZED,
            hotkey=HotkeyFlags(0x43, HotkeyModifiers.CONTROL),
        )
        assert ShellLinkHeader.from_bytes(hdr.to_bytes()) == hdr


class TestUpdateLinkFlags:
    def test_set(self):
        hdr = ShellLinkHeader()
        hdr.update_link_flags(LinkFlags.HAS_ARGUMENTS, True)
        assert hdr.link_flags == LinkFlags.IS_UNICODE | LinkFlags.HAS_ARGUMENTS

    def test_clear(self):
        hdr = ShellLinkHeader()
        hdr.update_link_flags(LinkFlags.IS_UNICODE, False)
        assert hdr.link_flags == 0

    def test_clear_absent_flag_is_noop(self):
        hdr = ShellLinkHeader()
        hdr.update_link_flags(LinkFlags.HAS_NAME, False)
        assert hdr.link_flags == LinkFlags.IS_UNICODE


class TestAdvisories:
    def test_reserved_attribute_bits_warn(self):
        hdr = ShellLinkHeader(file_attributes=FileAttributeFlags.RESERVED1)
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            hdr.to_bytes()
        assert any("reserved" in str(x.message) for x in w)

    def test_nonstandard_hotkey_warns(self):
        hdr = ShellLinkHeader(hotkey=HotkeyFlags(0x01))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            hdr.to_bytes()
        assert any("hotkey" in str(x.message) for x in w)

    def test_clean_header_does_not_warn(self):
        hdr = ShellLinkHeader(
            file_attributes=FileAttributeFlags.ARCHIVE,
            hotkey=HotkeyFlags(0x43, HotkeyModifiers.CONTROL),
        )
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            hdr.to_bytes()


class TestFromBytesErrors:
    def test_short_input(self):
        with pytest.raises(TruncatedDataError, match="76"):
            ShellLinkHeader.from_bytes(b"\x4c\x00\x00\x00")

    def test_bad_header_size(self):
        data = bytearray(ShellLinkHeader().to_bytes())
        struct.pack_into("<I", data, 0, 0x50)
        with pytest.raises(ParseError, match="header size"):
            ShellLinkHeader.from_bytes(bytes(data))

    def test_bad_clsid(self):
        data = bytearray(ShellLinkHeader().to_bytes())
        data[4] = 0xFF
        with pytest.raises(ParseError, match="CLSID"):
            ShellLinkHeader.from_bytes(bytes(data))

    def test_unknown_show_command_is_normal(self):
        data = bytearray(ShellLinkHeader().to_bytes())
        struct.pack_into("<I", data, 60, 5)
        assert ShellLinkHeader.from_bytes(bytes(data)).show_command is ShowCommand.NORMAL


class TestFiletime:
    def test_none_is_unset(self):
        assert to_filetime(None) == 0

    def test_int_passthrough(self):
        assert to_filetime(12345) == 12345

    def test_epoch(self):
        assert to_filetime(datetime(1601, 1, 1, tzinfo=timezone.utc)) == 0

    def test_unix_epoch(self):
        dt = datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert to_filetime(dt) == 116_444_736_000_000_000

    def test_naive_datetime_rejected(self):
        with pytest.raises(TypeError, match="timezone-aware"):
            to_filetime(datetime(2024, 1, 1))

    def test_bad_type(self):
        with pytest.raises(TypeError):
            to_filetime("2024-01-01")

    def test_negative_ticks(self):
        with pytest.raises(ValueError):
            to_filetime(-1)

    def test_inverse(self):
        assert filetime_to_datetime(116_444_736_000_000_000) == datetime(
            1970, 1, 1, tzinfo=timezone.utc
        )
        assert filetime_to_datetime(0) is None
