"""mslnk -- build Windows .lnk files (MS-SHLLINK) from a target path."""

__version__ = "0.1.0"

from .builder import build_from_path, build_link, build_lnk, new_link, write_lnk
from .errors import (
    InvalidTargetError,
    InvariantError,
    LinkIOError,
    MSLinkError,
    ParseError,
    TruncatedDataError,
)
from .extradata import ExtraData, ExtraDataKind
from .flags import (
    FileAttributeFlags,
    HotkeyFlags,
    HotkeyModifiers,
    LinkFlags,
    ShowCommand,
)
from .header import ShellLinkHeader
from .linkinfo import LinkInfo
from .linktarget import LinkTargetIdList
from .parser import format_lnk, parse_lnk
from .shellitem import FileEntryItem, SegmentKind, ShellItem
from .shelllink import ShellLink, write_to

__all__ = [
    "build_from_path",
    "build_link",
    "build_lnk",
    "new_link",
    "write_lnk",
    "write_to",
    "parse_lnk",
    "format_lnk",
    "ShellLink",
    "ShellLinkHeader",
    "LinkTargetIdList",
    "LinkInfo",
    "ShellItem",
    "FileEntryItem",
    "SegmentKind",
    "ExtraData",
    "ExtraDataKind",
    "LinkFlags",
    "FileAttributeFlags",
    "HotkeyFlags",
    "HotkeyModifiers",
    "ShowCommand",
    "MSLinkError",
    "LinkIOError",
    "ParseError",
    "TruncatedDataError",
    "InvalidTargetError",
    "InvariantError",
    "__version__",
]
