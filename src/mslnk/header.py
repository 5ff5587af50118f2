"""ShellLinkHeader (MS-SHLLINK 2.1): the fixed 76-byte record."""

import struct
import warnings
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from ._constants import HEADER_SIZE, HOTKEY_VK_VALID, LINK_CLSID
from ._types import Timestamp
from .errors import ParseError, TruncatedDataError
from .flags import (
    RESERVED_ATTRIBUTES,
    FileAttributeFlags,
    HotkeyFlags,
    LinkFlags,
    ShowCommand,
)

# ---------------------------------------------------------------------------
# Timestamp epoch
# ---------------------------------------------------------------------------
_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def to_filetime(val: Timestamp = None) -> int:
    """Convert *val* to Windows FILETIME ticks (100 ns since 1601-01-01 UTC).

    Accepts ``None`` (unset, 0), ``int`` (raw ticks) or a timezone-aware
    ``datetime``.
    """
    if val is None:
        return 0
    if isinstance(val, datetime):
        if val.tzinfo is None:
            raise TypeError(
                "datetime must be timezone-aware (e.g. tzinfo=timezone.utc)"
            )
        td = val - _FILETIME_EPOCH
        return td.days * 864_000_000_000 + td.seconds * 10_000_000 + td.microseconds * 10
    if isinstance(val, int):
        if not 0 <= val <= 0xFFFF_FFFF_FFFF_FFFF:
            raise ValueError(f"FILETIME {val} does not fit in 64 bits")
        return val
    raise TypeError(f"Expected None, int, or datetime, got {type(val).__name__}")


def filetime_to_datetime(ticks: int) -> datetime | None:
    """Inverse of :func:`to_filetime`; 0 (unset) maps to ``None``."""
    if not ticks:
        return None
    return _FILETIME_EPOCH + timedelta(microseconds=ticks // 10)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class ShellLinkHeader:
    """Header fields; timestamps are raw FILETIME ticks (0 = unset)."""

    link_flags: LinkFlags = LinkFlags.IS_UNICODE
    file_attributes: FileAttributeFlags = FileAttributeFlags(0)
    creation_time: int = 0
    access_time: int = 0
    write_time: int = 0
    file_size: int = 0
    icon_index: int = 0
    show_command: ShowCommand = ShowCommand.NORMAL
    hotkey: HotkeyFlags = field(default_factory=HotkeyFlags)

    def update_link_flags(self, flag: LinkFlags, present: bool) -> None:
        """Set *flag* if *present*, clear it otherwise."""
        if present:
            self.link_flags = LinkFlags(int(self.link_flags) | int(flag))
        else:
            self.link_flags = LinkFlags(int(self.link_flags) & ~int(flag))

    def to_bytes(self) -> bytes:
        # MS-SHLLINK 2.1.2: FileAttributes bits 3 and 6 are reserved, MUST be zero.
        if self.file_attributes & RESERVED_ATTRIBUTES:
            warnings.warn(
                f"file_attributes 0x{int(self.file_attributes):08X} has reserved "
                f"bits set (bits 3 and 6 MUST be zero per MS-SHLLINK section 2.1.2)",
                stacklevel=2,
            )
        # MS-SHLLINK 2.1.3: HotKey VK code should be from the normative list.
        if self.hotkey.key and self.hotkey.key not in HOTKEY_VK_VALID:
            warnings.warn(
                f"hotkey key 0x{self.hotkey.key:02X} is not in the MS-SHLLINK "
                f"section 2.1.3 normative VK code list for HotKey",
                stacklevel=2,
            )

        hdr = bytearray(HEADER_SIZE)
        struct.pack_into("<I", hdr, 0, HEADER_SIZE)
        hdr[4:20] = LINK_CLSID
        struct.pack_into("<I", hdr, 20, self.link_flags)
        struct.pack_into("<I", hdr, 24, self.file_attributes)
        struct.pack_into("<Q", hdr, 28, self.creation_time)
        struct.pack_into("<Q", hdr, 36, self.access_time)
        struct.pack_into("<Q", hdr, 44, self.write_time)
        struct.pack_into("<I", hdr, 52, self.file_size)
        struct.pack_into("<i", hdr, 56, self.icon_index)
        struct.pack_into("<I", hdr, 60, self.show_command)
        struct.pack_into("<H", hdr, 64, self.hotkey.to_int())
        # 66..76: Reserved1 (u16), Reserved2 (u32), Reserved3 (u32) stay zero
        return bytes(hdr)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ShellLinkHeader":
        if len(data) < HEADER_SIZE:
            raise TruncatedDataError(
                "Data too short for an MS-SHLLINK header (need >= 76 bytes)"
            )
        hdr_size = struct.unpack_from("<I", data, 0)[0]
        if hdr_size != HEADER_SIZE:
            raise ParseError(f"Invalid header size 0x{hdr_size:08X} (expected 0x4C)")
        if bytes(data[4:20]) != LINK_CLSID:
            raise ParseError("LinkCLSID does not identify a shell link")

        flags, attrs = struct.unpack_from("<II", data, 20)
        ctime, atime, wtime = struct.unpack_from("<QQQ", data, 28)
        file_size, icon_index, show = struct.unpack_from("<IiI", data, 52)
        hotkey = struct.unpack_from("<H", data, 64)[0]
        return cls(
            link_flags=LinkFlags(flags),
            file_attributes=FileAttributeFlags(attrs),
            creation_time=ctime,
            access_time=atime,
            write_time=wtime,
            file_size=file_size,
            icon_index=icon_index,
            show_command=ShowCommand.from_int(show),
            hotkey=HotkeyFlags.from_int(hotkey),
        )
