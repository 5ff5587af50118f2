"""Shell item codec: self-sized ItemID records and file entry items.

A file entry item describes one path segment::

    +00 u16  item size (self-inclusive)
    +02 u8   class type indicator (directory/file x ascii/wide)
    +03 u8   reserved (0)
    +04 u32  file size (0, unknown when the link is created)
    +08 u32  modification time (0)
    +0C u16  file attribute flags
    +0E      primary name, NUL terminated (UTF-16LE for the wide kinds)
    ...      BEEF0004 extension block carrying the UTF-16LE name

Every size field is computed bottom-up from the parts it covers, and the
serialized length is checked against it.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum

from ._constants import (
    CLASS_DIRECTORY_ASCII,
    CLASS_DIRECTORY_WIDE,
    CLASS_FILE_ASCII,
    CLASS_FILE_WIDE,
    EXT_FIRST_OFFSET,
    EXT_SIG,
    EXT_VERSION,
    EXT_VERSION_ID,
    EXTENSION_FIXED_SIZE,
    FILE_ENTRY_FIXED_SIZE,
)
from .errors import (
    InvalidTargetError,
    InvariantError,
    ParseError,
    TruncatedDataError,
)
from .flags import FileAttributeFlags

# size, version, signature, ctime, atime, version id, reserved
_EXT_HEADER = struct.Struct("<HHIIIHI")
# size, class type, reserved, file size, mtime, attributes
_ENTRY_HEADER = struct.Struct("<HBBIIH")

_WIDE = "utf-16-le"


def _encode_wide(text: str) -> bytes:
    # surrogatepass: unpaired surrogates are legal in NTFS names
    return text.encode(_WIDE, errors="surrogatepass") + b"\x00\x00"


# ---------------------------------------------------------------------------
# ItemID
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class ShellItem:
    """One ItemID: a uint16 self-inclusive size followed by opaque data."""

    size: int
    payload: bytes

    @classmethod
    def from_bytes(cls, blob: bytes) -> "ShellItem":
        """Wrap a complete serialized item, size field included."""
        if len(blob) < 2:
            raise TruncatedDataError("ItemID needs at least a 2-byte size field")
        declared = struct.unpack_from("<H", blob, 0)[0]
        if declared != len(blob):
            raise ParseError(
                f"ItemID declares {declared} bytes but {len(blob)} were supplied"
            )
        return cls(size=len(blob), payload=bytes(blob[2:]))

    @classmethod
    def read(cls, data: bytes, offset: int) -> tuple["ShellItem | None", int]:
        """Read one item at *offset*; return ``(item, next_offset)``.

        The terminal ItemID (size 0) yields ``None``.
        """
        if offset + 2 > len(data):
            raise TruncatedDataError(f"ItemID size missing at offset {offset}")
        size = struct.unpack_from("<H", data, offset)[0]
        if size == 0:
            return None, offset + 2
        if size < 2:
            raise ParseError(f"Invalid ItemID size {size} at offset {offset}")
        end = offset + size
        if end > len(data):
            raise TruncatedDataError(
                f"ItemID at offset {offset} declares {size} bytes, "
                f"only {len(data) - offset} available"
            )
        return cls(size=size, payload=bytes(data[offset + 2 : end])), end

    def to_bytes(self) -> bytes:
        if len(self.payload) + 2 != self.size:
            raise InvariantError(
                f"ItemID size {self.size} does not match payload of "
                f"{len(self.payload)} bytes"
            )
        return struct.pack("<H", self.size) + self.payload


# ---------------------------------------------------------------------------
# Segment classification
# ---------------------------------------------------------------------------
class SegmentKind(IntEnum):
    """Class type indicator of a file entry item.

    Bit 0x01 marks a directory, 0x02 a file, 0x04 a UTF-16 primary name.
    """

    DIRECTORY_ASCII = CLASS_DIRECTORY_ASCII
    FILE_ASCII = CLASS_FILE_ASCII
    DIRECTORY_WIDE = CLASS_DIRECTORY_WIDE
    FILE_WIDE = CLASS_FILE_WIDE

    @classmethod
    def classify(cls, is_terminal: bool, is_ascii: bool) -> "SegmentKind":
        return _KIND_TABLE[bool(is_terminal), bool(is_ascii)]

    @property
    def is_directory(self) -> bool:
        return self in (SegmentKind.DIRECTORY_ASCII, SegmentKind.DIRECTORY_WIDE)

    @property
    def is_wide(self) -> bool:
        return bool(self & 0x04)

    @property
    def attribute_flags(self) -> FileAttributeFlags:
        if self.is_directory:
            return FileAttributeFlags.DIRECTORY
        return FileAttributeFlags.ARCHIVE


_KIND_TABLE = {
    (False, True): SegmentKind.DIRECTORY_ASCII,
    (False, False): SegmentKind.DIRECTORY_WIDE,
    (True, True): SegmentKind.FILE_ASCII,
    (True, False): SegmentKind.FILE_WIDE,
}


# ---------------------------------------------------------------------------
# BEEF0004 extension block
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class ExtensionBlock:
    """Version 8 file entry extension block.

    Layout: u16 size, u16 version, u32 signature, u32 ctime, u32 atime,
    u16 version id, u32 reserved, UTF-16LE name + NUL, u16 first offset.
    Timestamps are unknown at build time and written as zero.
    """

    name: str
    version: int = EXT_VERSION
    signature: int = EXT_SIG
    ctime: int = 0
    atime: int = 0
    version_id: int = EXT_VERSION_ID
    reserved: int = 0
    first_offset: int = EXT_FIRST_OFFSET

    def wide_name(self) -> bytes:
        return _encode_wide(self.name)

    def computed_size(self) -> int:
        return EXTENSION_FIXED_SIZE + len(self.wide_name())

    def to_bytes(self) -> bytes:
        size = self.computed_size()
        data = _EXT_HEADER.pack(
            size,
            self.version,
            self.signature,
            self.ctime,
            self.atime,
            self.version_id,
            self.reserved,
        )
        data += self.wide_name()
        data += struct.pack("<H", self.first_offset)
        if len(data) != size:
            raise InvariantError(
                f"Extension block serialized to {len(data)} bytes, expected {size}"
            )
        return data

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "ExtensionBlock":
        if offset + _EXT_HEADER.size > len(data):
            raise TruncatedDataError(f"Extension block header missing at {offset}")
        size, version, signature, ctime, atime, version_id, reserved = (
            _EXT_HEADER.unpack_from(data, offset)
        )
        if signature != EXT_SIG:
            raise ParseError(
                f"Unexpected extension signature 0x{signature:08X} "
                f"(expected 0x{EXT_SIG:08X})"
            )
        if size < EXTENSION_FIXED_SIZE:
            raise ParseError(f"Extension block size {size} is below the minimum")
        end = offset + size
        if end > len(data):
            raise TruncatedDataError(
                f"Extension block declares {size} bytes, "
                f"only {len(data) - offset} available"
            )
        wide = data[offset + _EXT_HEADER.size : end - 2]
        name = wide.decode(_WIDE, errors="surrogatepass").split("\x00", 1)[0]
        first_offset = struct.unpack_from("<H", data, end - 2)[0]
        return cls(
            name=name,
            version=version,
            signature=signature,
            ctime=ctime,
            atime=atime,
            version_id=version_id,
            reserved=reserved,
            first_offset=first_offset,
        )


# ---------------------------------------------------------------------------
# File entry item
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class FileEntryItem:
    """A directory or file path segment.

    Built transiently during IDList assembly and serialized straight away.
    """

    kind: SegmentKind
    entry_name: str
    extension_block: ExtensionBlock
    file_size: int = 0
    modify_time: int = 0
    reserved: int = 0

    @classmethod
    def for_segment(cls, name: str, index: int, count: int) -> "FileEntryItem":
        """Build the item for segment *index* of a *count*-segment path.

        Every segment but the last is a directory.
        """
        if not name:
            raise InvalidTargetError("Path segments must not be empty")
        if not 0 <= index < count:
            raise InvalidTargetError(f"Segment index {index} outside 0..{count - 1}")
        kind = SegmentKind.classify(index + 1 == count, name.isascii())
        return cls(kind=kind, entry_name=name, extension_block=ExtensionBlock(name))

    @property
    def class_type_indicator(self) -> int:
        return int(self.kind)

    @property
    def file_attribute_flags(self) -> FileAttributeFlags:
        return self.kind.attribute_flags

    def primary_name(self) -> bytes:
        """The NUL-terminated name that follows the attribute field."""
        if self.kind.is_wide:
            return _encode_wide(self.entry_name)
        return self.entry_name.encode("ascii") + b"\x00"

    def computed_size(self) -> int:
        return (
            FILE_ENTRY_FIXED_SIZE
            + len(self.primary_name())
            + self.extension_block.computed_size()
        )

    def to_bytes(self) -> bytes:
        size = self.computed_size()
        if size > 0xFFFF:
            raise InvalidTargetError(
                f"Path segment {self.entry_name[:32]!r}... is too long for an ItemID"
            )
        data = bytearray(
            _ENTRY_HEADER.pack(
                size,
                self.class_type_indicator,
                self.reserved,
                self.file_size,
                self.modify_time,
                self.file_attribute_flags,
            )
        )
        data += self.primary_name()
        data += self.extension_block.to_bytes()
        if len(data) != size:
            raise InvariantError(
                f"File entry {self.entry_name!r} serialized to {len(data)} bytes, "
                f"expected {size}"
            )
        return bytes(data)

    def to_shell_item(self) -> ShellItem:
        return ShellItem.from_bytes(self.to_bytes())

    @classmethod
    def from_shell_item(cls, item: ShellItem) -> "FileEntryItem":
        """Decode a file entry item written in the layout above."""
        body = item.payload
        # class type, reserved, file size, mtime, attributes
        if len(body) < 12:
            raise TruncatedDataError("File entry item shorter than its fixed fields")
        class_type, reserved, file_size, mtime, _attrs = struct.unpack_from(
            "<BBIIH", body, 0
        )
        try:
            kind = SegmentKind(class_type)
        except ValueError:
            raise ParseError(
                f"Class type 0x{class_type:02X} is not a file entry item"
            ) from None

        start = 12
        if kind.is_wide:
            end = start
            while end + 1 < len(body) and body[end : end + 2] != b"\x00\x00":
                end += 2
            if end + 1 >= len(body):
                raise TruncatedDataError("Unterminated wide entry name")
            name = body[start:end].decode(_WIDE, errors="surrogatepass")
            ext_offset = end + 2
        else:
            end = body.find(b"\x00", start)
            if end < 0:
                raise TruncatedDataError("Unterminated entry name")
            name = body[start:end].decode("ascii", errors="replace")
            ext_offset = end + 1

        return cls(
            kind=kind,
            entry_name=name,
            extension_block=ExtensionBlock.from_bytes(body, ext_offset),
            file_size=file_size,
            modify_time=mtime,
            reserved=reserved,
        )
