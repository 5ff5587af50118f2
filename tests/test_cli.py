"""Tests for mslnk.cli."""

import argparse
import json
import struct

import pytest

from mslnk.builder import build_lnk
from mslnk.cli import _parse_hotkey, _parse_timestamp, main


class TestParseHotkey:
    def test_ctrl_c(self):
        assert _parse_hotkey("CTRL+C") == (0x43, 0x02)

    def test_multiple_modifiers(self):
        assert _parse_hotkey("alt+shift+f5") == (0x74, 0x05)

    @pytest.mark.parametrize("val", ["C", "META+C", "CTRL+ESC"])
    def test_invalid(self, val):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_hotkey(val)


class TestParseTimestamp:
    def test_iso(self):
        dt = _parse_timestamp("2024-01-01T00:00:00")
        assert dt.tzinfo is not None
        assert dt.year == 2024

    def test_ticks(self):
        assert _parse_timestamp("0x10") == 16

    def test_empty(self):
        assert _parse_timestamp("") is None

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid timestamp"):
            _parse_timestamp("yesterday")


class TestBuild:
    def test_build(self, tmp_path, capsys, simple_target):
        out = tmp_path / "out.lnk"
        main(["build", simple_target, "-o", str(out)])
        assert out.read_bytes() == build_lnk(simple_target)
        assert "[+] Written 251 bytes" in capsys.readouterr().out

    def test_options(self, tmp_path):
        out = tmp_path / "out.lnk"
        main(
            [
                "build",
                r"C:\Windows\notepad.exe",
                "-o",
                str(out),
                "--name",
                "Notepad",
                "--arguments",
                "x.txt",
                "--hotkey",
                "CTRL+C",
                "--show",
                "maximized",
                "--icon-index",
                "2",
            ]
        )
        data = out.read_bytes()
        flags = struct.unpack_from("<I", data, 20)[0]
        assert flags & 0x04 and flags & 0x20
        assert data[64] == 0x43
        assert data[65] == 0x02
        assert struct.unpack_from("<I", data, 60)[0] == 3
        assert struct.unpack_from("<i", data, 56)[0] == 2

    def test_from_json(self, tmp_path, simple_target):
        cfg = tmp_path / "cfg.json"
        cfg.write_text(
            json.dumps(
                {
                    "name": "from json",
                    "arguments": "--y",
                    "creation_time": "1970-01-01T00:00:00+00:00",
                }
            )
        )
        out = tmp_path / "out.lnk"
        main(["build", simple_target, "-o", str(out), "-j", str(cfg), "--name", "cli"])
        expected = build_lnk(
            simple_target,
            name="cli",
            arguments="--y",
            creation_time=116_444_736_000_000_000,
        )
        assert out.read_bytes() == expected

    def test_bad_json_key(self, tmp_path, simple_target):
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"no_such_option": 1}))
        with pytest.raises(SystemExit) as exc:
            main(["build", simple_target, "-o", str(tmp_path / "o.lnk"), "-j", str(cfg)])
        assert "Check JSON keys" in str(exc.value.code)

    def test_directory(self, tmp_path):
        out = tmp_path / "dir.lnk"
        main(["build", r"C:\Windows", "-o", str(out), "--directory"])
        data = out.read_bytes()
        assert len(data) == 76
        assert struct.unpack_from("<I", data, 24)[0] == 0x10

    def test_ansi(self, tmp_path, simple_target):
        out = tmp_path / "a.lnk"
        main(["build", simple_target, "-o", str(out), "--ansi"])
        assert not struct.unpack_from("<I", out.read_bytes(), 20)[0] & 0x80

    @pytest.mark.parametrize(
        "cfg",
        [{"creation_time": -1}, {"icon_index": 2**31}, {"file_attributes": 2**32}],
    )
    def test_bad_json_value(self, tmp_path, simple_target, cfg):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps(cfg))
        out = tmp_path / "o.lnk"
        with pytest.raises(SystemExit) as exc:
            main(["build", simple_target, "-o", str(out), "-j", str(path)])
        assert str(exc.value.code).startswith("Error: input:")
        assert not out.exists()

    def test_invalid_target(self, tmp_path):
        out = tmp_path / "bad.lnk"
        with pytest.raises(SystemExit) as exc:
            main(["build", "relative.txt", "-o", str(out)])
        assert str(exc.value.code).startswith("Error: input:")
        assert not out.exists()

    def test_invalid_hotkey(self, tmp_path, simple_target):
        with pytest.raises(SystemExit) as exc:
            main(["build", simple_target, "--hotkey", "C"])
        assert exc.value.code == 2

    def test_verbose(self, tmp_path, simple_target):
        out = tmp_path / "v.lnk"
        main(["-v", "build", simple_target, "-o", str(out)])
        assert out.exists()


class TestCreate:
    def test_directory(self, tmp_path, capsys):
        out = tmp_path / "out" / "dir.lnk"
        main(["create", str(tmp_path), "-o", str(out)])
        assert len(out.read_bytes()) == 76
        assert "[+] Written 76 bytes" in capsys.readouterr().out

    def test_missing(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["create", str(tmp_path / "nope"), "-o", str(tmp_path / "o.lnk")])
        assert str(exc.value.code).startswith("Error: io:")


class TestParse:
    def test_text(self, tmp_path, capsys, simple_lnk_bytes):
        path = tmp_path / "x.lnk"
        path.write_bytes(simple_lnk_bytes)
        main(["parse", str(path)])
        out = capsys.readouterr().out
        assert f"FILE: {path}" in out
        assert "--- HEADER ---" in out

    def test_json(self, tmp_path, capsys, full_lnk_bytes):
        path = tmp_path / "x.lnk"
        path.write_bytes(full_lnk_bytes)
        main(["parse", str(path), "--json"])
        d = json.loads(capsys.readouterr().out)
        assert d["name"] == "Notepad"
        assert d["hotkey"] == "CTRL+C"
        assert len(d["id_list"]) == 4
        assert d["link_info_size"] is None
        assert d["creation_time"] is None
        assert "HAS_NAME" in d["flag_names"]

    def test_bad_file(self, tmp_path):
        path = tmp_path / "x.lnk"
        path.write_bytes(b"not a link")
        with pytest.raises(SystemExit) as exc:
            main(["parse", str(path)])
        assert "parse:" in str(exc.value.code)


def test_no_command():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
