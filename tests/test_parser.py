"""Tests for mslnk.parser."""

import struct

import pytest

from mslnk.builder import build_lnk
from mslnk.errors import LinkIOError, ParseError, TruncatedDataError
from mslnk.extradata import ExtraDataKind
from mslnk.flags import HotkeyFlags, HotkeyModifiers, LinkFlags
from mslnk.header import ShellLinkHeader
from mslnk.linktarget import LinkTargetIdList
from mslnk.parser import describe_item, format_lnk, parse_lnk
from mslnk.shellitem import ShellItem
from mslnk.stringdata import encode_string


class TestParseBuilderOutput:
    def test_simple(self, simple_lnk_bytes, simple_id_list):
        link = parse_lnk(simple_lnk_bytes)
        assert link.header.link_flags == 0x99
        assert link.linktarget_id_list == simple_id_list
        assert link.relative_path == "./b.txt"
        assert link.working_dir == "C:\\a"
        assert link.name is None
        assert link.link_info is None
        assert link.extra_data == []

    def test_reserializes_identically(self, simple_lnk_bytes, full_lnk_bytes):
        assert parse_lnk(simple_lnk_bytes).to_bytes() == simple_lnk_bytes
        assert parse_lnk(full_lnk_bytes).to_bytes() == full_lnk_bytes

    def test_full(self, full_lnk_bytes):
        link = parse_lnk(full_lnk_bytes)
        assert link.name == "Notepad"
        assert link.relative_path == r"..\Windows\notepad.exe"
        assert link.working_dir == r"C:\Windows"
        assert link.arguments == "--flag value"
        assert link.icon_location == r"C:\Windows\notepad.exe"
        assert link.header.icon_index == 2
        assert link.header.file_size == 201216
        assert link.header.hotkey == HotkeyFlags(0x43, HotkeyModifiers.CONTROL)

    def test_ansi(self):
        data = build_lnk(r"C:\a\b.txt", name="café", is_unicode=False)
        link = parse_lnk(data)
        assert not link.is_unicode
        assert link.name == "café"

    def test_from_path(self, simple_lnk_bytes, tmp_path):
        path = tmp_path / "x.lnk"
        path.write_bytes(simple_lnk_bytes)
        assert parse_lnk(path).relative_path == "./b.txt"
        assert parse_lnk(str(path)).working_dir == "C:\\a"


class TestOptionalSections:
    def test_link_info_skipped(self):
        flags = LinkFlags.HAS_LINK_INFO | LinkFlags.HAS_NAME | LinkFlags.IS_UNICODE
        link_info = struct.pack("<IIIIIII", 0x1C, 0x1C, 0, 0, 0, 0, 0)
        data = (
            ShellLinkHeader(link_flags=flags).to_bytes()
            + link_info
            + encode_string("hi", True)
        )
        link = parse_lnk(data)
        assert link.link_info.size == 0x1C
        assert link.name == "hi"

    def test_extra_data_classified(self, simple_lnk_bytes):
        block = struct.pack("<II", 12, 0xA000000C) + b"\x00" * 4
        link = parse_lnk(simple_lnk_bytes + block + b"\x00" * 4)
        assert [b.kind for b in link.extra_data] == [
            ExtraDataKind.VISTA_AND_ABOVE_ID_LIST_PROPS
        ]


class TestErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(LinkIOError):
            parse_lnk(tmp_path / "missing.lnk")

    def test_truncated(self, simple_lnk_bytes):
        with pytest.raises(TruncatedDataError):
            parse_lnk(simple_lnk_bytes[:100])

    def test_not_a_link(self):
        with pytest.raises(ParseError):
            parse_lnk(b"\x00" * 100)


class TestDescribeItem:
    def test_root(self, simple_id_list):
        text = describe_item(simple_id_list.items[0])
        assert "20d04fe0-3aea-1069-a2d8-08002b30309d" in text
        assert "My Computer" in text

    def test_drive(self, simple_id_list):
        assert describe_item(simple_id_list.items[1]) == "Drive: C:\\"

    def test_entries(self, simple_id_list):
        assert describe_item(simple_id_list.items[2]) == 'Dir: "a"'
        assert describe_item(simple_id_list.items[3]) == 'File: "b.txt"'

    def test_wide_entry(self):
        id_list = LinkTargetIdList.from_target("C:\\文档\\b.txt")
        assert describe_item(id_list.items[2]) == 'Dir: "文档"'

    def test_undecodable_entry(self):
        assert "undecodable" in describe_item(ShellItem(size=5, payload=b"\x31\x00\x00"))

    def test_unknown(self):
        assert describe_item(ShellItem(size=4, payload=b"\x99\x00")) == (
            "Unknown: type=0x99"
        )

    def test_empty(self):
        assert describe_item(ShellItem(size=2, payload=b"")) == "Empty"


class TestFormatLnk:
    def test_sections(self, simple_lnk_bytes):
        out = format_lnk(parse_lnk(simple_lnk_bytes))
        assert "--- HEADER ---" in out
        assert "    - IS_UNICODE" in out
        assert "--- LINK TARGET ID LIST (size=147) ---" in out
        assert 'File: "b.txt"' in out
        assert "--- STRING DATA ---" in out
        assert '"./b.txt"' in out
        assert "RelativePath:" in out
        assert "--- EXTRA DATA ---" not in out

    def test_hotkey_and_extra_data(self, full_lnk_bytes):
        block = struct.pack("<II", 12, 0xA0000003) + b"\x00" * 4
        out = format_lnk(parse_lnk(full_lnk_bytes + block))
        assert "CTRL+C" in out
        assert "TrackerDataBlock" in out

    def test_unset_times(self, simple_lnk_bytes):
        assert "0 (not set)" in format_lnk(parse_lnk(simple_lnk_bytes))
