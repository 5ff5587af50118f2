"""CLI entry point: ``mslnk build`` / ``mslnk create`` / ``mslnk parse``."""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from ._constants import HOTKEY_VK_VALID, VK_KEYS
from .builder import build_from_path, build_link, write_to
from .errors import MSLinkError
from .flags import HotkeyModifiers, ShowCommand, flag_names
from .header import filetime_to_datetime
from .parser import describe_item, format_lnk, parse_lnk
from .shelllink import STRING_FIELDS, ShellLink

SHOW_MAP = {
    "normal": ShowCommand.NORMAL,
    "maximized": ShowCommand.MAXIMIZED,
    "minimized": ShowCommand.MIN_NO_ACTIVE,
}

# Reverse lookups for --hotkey parsing
_MOD_NAMES = {
    "SHIFT": HotkeyModifiers.SHIFT,
    "CTRL": HotkeyModifiers.CONTROL,
    "ALT": HotkeyModifiers.ALT,
}
_VK_NAMES = {v.upper(): k for k, v in VK_KEYS.items()}


def _parse_timestamp(val: str) -> datetime | int | None:
    """Parse a JSON timestamp string into a datetime or int."""
    if not val:
        return None
    try:
        dt = datetime.fromisoformat(val)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except ValueError:
        try:
            return int(val, 0)
        except ValueError:
            raise ValueError(
                f"Invalid timestamp: {val!r} (expected ISO 8601 or FILETIME ticks)"
            ) from None


def _parse_hotkey(val: str) -> tuple[int, int]:
    """Parse a hotkey string like ``CTRL+C`` into ``(vk_code, modifier_mask)``.

    Format: ``MOD[+MOD]+KEY`` where MOD is SHIFT/CTRL/ALT and KEY is a
    virtual key name (A-Z, 0-9, F1-F24, NUMLOCK or SCROLL).
    """
    parts = [p.strip().upper() for p in val.split("+")]
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(
            f"Invalid hotkey: {val!r} (expected MOD+KEY, e.g. CTRL+C)"
        )

    key_name = parts[-1]
    mod_mask = 0
    for mod in parts[:-1]:
        if mod not in _MOD_NAMES:
            raise argparse.ArgumentTypeError(
                f"Unknown modifier: {mod!r} (expected SHIFT, CTRL, or ALT)"
            )
        mod_mask |= _MOD_NAMES[mod]

    if key_name not in _VK_NAMES:
        raise argparse.ArgumentTypeError(f"Unknown key: {key_name!r}")

    vk = _VK_NAMES[key_name]
    if vk not in HOTKEY_VK_VALID:
        raise argparse.ArgumentTypeError(
            f"Key {key_name!r} (0x{vk:02X}) is not valid for .lnk hotkeys"
        )
    return vk, mod_mask


def _cmd_build(args: argparse.Namespace) -> None:
    # Load JSON config as base (keys match build_lnk kwargs)
    cfg: dict = {}
    if args.from_json:
        try:
            cfg = json.loads(Path(args.from_json).read_text(encoding="utf-8"))
        except OSError as exc:
            sys.exit(f"Error: cannot read {args.from_json}: {exc}")
        except json.JSONDecodeError as exc:
            sys.exit(f"Error: invalid JSON in {args.from_json}: {exc}")

    # Target always comes from CLI (positional)
    cfg["target"] = args.target

    # Map CLI attr -> build_lnk kwarg; only override if explicitly set
    _cli_overrides = {
        "name": "name",
        "relative_path": "relative_path",
        "working_dir": "working_dir",
        "arguments": "arguments",
        "icon": "icon_location",
        "icon_index": "icon_index",
        "file_size": "file_size",
    }
    for attr, key in _cli_overrides.items():
        val = getattr(args, attr, None)
        if val is not None:
            cfg[key] = val

    if args.show is not None:
        cfg["show_command"] = SHOW_MAP[args.show]

    if args.hotkey is not None:
        vk, mod = args.hotkey
        cfg["hotkey_vk"] = vk
        cfg["hotkey_mod"] = mod

    if args.directory:
        cfg["is_directory"] = True
    if args.ansi:
        cfg["is_unicode"] = False

    # Parse string timestamps into datetime/int
    for key in ("creation_time", "access_time", "write_time"):
        if key in cfg and isinstance(cfg[key], str):
            try:
                cfg[key] = _parse_timestamp(cfg[key])
            except ValueError as exc:
                sys.exit(f"Error: {key}: {exc}")

    try:
        link = build_link(**cfg)
        count = write_to(link, args.output)
    except TypeError as exc:
        sys.exit(f"Error: {exc}\nCheck JSON keys against: mslnk build --help")
    print(f"[+] Written {count} bytes -> {args.output}")


def _cmd_create(args: argparse.Namespace) -> None:
    link = build_from_path(args.path)
    count = write_to(link, args.output)
    print(f"[+] Written {count} bytes -> {args.output}")


def _serialize_link(link: ShellLink) -> dict:
    """Convert a parsed ShellLink to a JSON-friendly dict."""
    hdr = link.header
    times = {}
    for key in ("creation_time", "access_time", "write_time"):
        dt = filetime_to_datetime(getattr(hdr, key))
        times[key] = dt.isoformat() if dt else None
    d: dict = {
        "link_flags": int(hdr.link_flags),
        "flag_names": flag_names(hdr.link_flags),
        "file_attributes": int(hdr.file_attributes),
        **times,
        "file_size": hdr.file_size,
        "icon_index": hdr.icon_index,
        "show_command": int(hdr.show_command),
        "hotkey": str(hdr.hotkey),
    }
    id_list = link.linktarget_id_list
    d["id_list"] = (
        [
            {"size": item.size, "description": describe_item(item)}
            for item in id_list.items
        ]
        if id_list is not None
        else None
    )
    d["link_info_size"] = link.link_info.size if link.link_info is not None else None
    for attr, _flag, _max in STRING_FIELDS:
        d[attr] = getattr(link, attr)
    d["extra_data"] = [
        {
            "signature": block.signature,
            "name": block.kind.block_name,
            "size": block.size,
            "payload": block.payload.hex(),
        }
        for block in link.extra_data
    ]
    return d


def _cmd_parse(args: argparse.Namespace) -> None:
    for path in args.files:
        link = parse_lnk(path)
        if args.json:
            print(json.dumps(_serialize_link(link), indent=2, ensure_ascii=False))
        else:
            header = f"FILE: {path}"
            print(f"\n{'=' * 70}")
            print(header)
            print(f"{'=' * 70}")
            print(format_lnk(link))
            print()


def main(argv: list[str] | None = None) -> None:
    # suggest_on_error and color require Python 3.14+
    ap_kwargs: dict = {}
    if sys.version_info >= (3, 14):
        ap_kwargs["suggest_on_error"] = True
        ap_kwargs["color"] = True
    parser = argparse.ArgumentParser(
        prog="mslnk",
        description="Build and parse Windows .lnk files (MS-SHLLINK)",
        **ap_kwargs,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log each section written"
    )
    sub = parser.add_subparsers(dest="command")

    # -- build --
    bp = sub.add_parser(
        "build",
        help="Build a .lnk file from a Windows path",
        epilog=(
            "Timestamps, file attributes and extra LinkFlags bits can be set "
            "via --from-json. JSON keys match build_lnk() kwargs directly."
        ),
    )
    bp.add_argument("target", help="Full Windows target path (C:\\dir\\file)")
    bp.add_argument("-o", "--output", default="output.lnk", help="Output file path")
    bp.add_argument(
        "-j",
        "--from-json",
        default="",
        metavar="FILE",
        help="JSON config file (keys match build_lnk kwargs)",
    )
    bp.add_argument("--name", default=None, help="Tooltip / comment text")
    bp.add_argument(
        "--relative-path",
        default=None,
        help="Relative path to target (default ./<file name>)",
    )
    bp.add_argument(
        "--working-dir",
        default=None,
        help="Start-in directory (default: target's parent)",
    )
    bp.add_argument("--arguments", default=None, help="Command-line arguments")
    bp.add_argument("--icon", default=None, help="Icon source path")
    bp.add_argument("--icon-index", type=int, default=None, help="Icon resource index")
    bp.add_argument(
        "--show",
        choices=["normal", "maximized", "minimized"],
        default=None,
        help="Window show state",
    )
    bp.add_argument(
        "--hotkey",
        type=_parse_hotkey,
        default=None,
        help="Hotkey combo (e.g. CTRL+C, ALT+SHIFT+F5)",
    )
    bp.add_argument("--file-size", type=int, default=None, help="Target file size")
    bp.add_argument(
        "--directory",
        action="store_true",
        help="Target is a directory (no ID list is written)",
    )
    bp.add_argument(
        "--ansi",
        action="store_true",
        help="Write StringData in the ANSI code page instead of UTF-16",
    )

    # -- create --
    cp = sub.add_parser("create", help="Build a .lnk for an existing local path")
    cp.add_argument("path", help="File or directory to link to")
    cp.add_argument("-o", "--output", default="output.lnk", help="Output file path")

    # -- parse --
    pp = sub.add_parser("parse", help="Parse and display .lnk file(s)")
    pp.add_argument("files", nargs="+", help="LNK file(s) to parse")
    pp.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "build":
            _cmd_build(args)
        elif args.command == "create":
            _cmd_create(args)
        elif args.command == "parse":
            _cmd_parse(args)
    except MSLinkError as exc:
        sys.exit(f"Error: {exc}")


if __name__ == "__main__":
    main()
