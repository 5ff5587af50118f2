"""LinkTargetIDList (MS-SHLLINK 2.2): the target as a chain of shell items.

An absolute path ``C:\\a\\b.txt`` becomes::

    [This PC root] [drive C:\\] [dir "a"] [file "b.txt"] [terminator]

prefixed by the uint16 list size.
"""

import logging
import ntpath
import os
import struct
from dataclasses import dataclass, field
from pathlib import PureWindowsPath

from ._constants import DRIVE_ITEM_TEMPLATE, DRIVE_LETTER_OFFSET, ROOT_FOLDER_SHELL
from ._types import TargetPath
from .errors import InvalidTargetError, ParseError, TruncatedDataError
from .shellitem import FileEntryItem, ShellItem

logger = logging.getLogger(__name__)

_TERMINATOR = b"\x00\x00"


# ---------------------------------------------------------------------------
# Path decomposition
# ---------------------------------------------------------------------------
def split_target(target: TargetPath) -> tuple[str, list[str]]:
    """Split an absolute Windows path into ``(drive_letter, segments)``.

    ``/`` is accepted as a separator.  Empty and ``.`` components are dropped
    and ``..`` is rejected;
    the drive and root are never repeated as segments.
    """
    text = os.fspath(target)
    if not text:
        raise InvalidTargetError("Target path is empty")
    path = PureWindowsPath(text)
    drive = path.drive
    if (
        len(drive) != 2
        or drive[1] != ":"
        or not (drive[0].isascii() and drive[0].isalpha())
        or not path.root
    ):
        raise InvalidTargetError(
            f"Target path {text!r} is not an absolute path with a drive letter"
        )
    segments = [part for part in path.parts[1:] if part]
    if ".." in segments:
        raise InvalidTargetError(
            f"Target path {text!r} contains '..'; pass the resolved path"
        )
    if not segments:
        raise InvalidTargetError(f"Target path {text!r} has no path segments")
    return drive[0], segments


def target_name(target: TargetPath) -> str:
    """Final component of a Windows path."""
    return ntpath.basename(os.fspath(target))


# ---------------------------------------------------------------------------
# Fixed items
# ---------------------------------------------------------------------------
def root_item() -> ShellItem:
    """The "This PC" root folder item."""
    return ShellItem.from_bytes(ROOT_FOLDER_SHELL)


def drive_item(letter: str) -> ShellItem:
    """Drive volume item: the 25-byte template with *letter* substituted."""
    if len(letter) != 1 or not (letter.isascii() and letter.isalpha()):
        raise InvalidTargetError(f"Invalid drive letter {letter!r}")
    blob = bytearray(DRIVE_ITEM_TEMPLATE)
    blob[DRIVE_LETTER_OFFSET] = ord(letter)
    return ShellItem.from_bytes(bytes(blob))


# ---------------------------------------------------------------------------
# The list
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class LinkTargetIdList:
    """Ordered shell items; the terminal ItemID is implied, not stored."""

    items: list[ShellItem] = field(default_factory=list)

    @property
    def size(self) -> int:
        """IDListSize: 2 (terminator) plus the size of every item."""
        return 2 + sum(item.size for item in self.items)

    @classmethod
    def from_target(cls, target: TargetPath) -> "LinkTargetIdList":
        id_list = cls()
        id_list.set_linktarget(target)
        return id_list

    def set_linktarget(self, target: TargetPath) -> None:
        """Replace the items with root, drive and one item per path segment.

        Every item is built before the list is touched, so a failure leaves
        the previous contents in place.
        """
        drive, segments = split_target(target)
        count = len(segments)
        items = [root_item(), drive_item(drive)]
        for index, segment in enumerate(segments):
            items.append(FileEntryItem.for_segment(segment, index, count).to_shell_item())

        total = 2 + sum(item.size for item in items)
        if total > 0xFFFF:
            raise InvalidTargetError(
                f"LinkTargetIDList for {os.fspath(target)!r} would be {total} bytes "
                f"(limit 65535)"
            )
        logger.debug("IDList for %s: %d segments, %d bytes", target, count, total)
        self.items = items

    def to_bytes(self) -> bytes:
        size = self.size
        if size > 0xFFFF:
            raise InvalidTargetError(f"LinkTargetIDList is {size} bytes (limit 65535)")
        out = bytearray(struct.pack("<H", size))
        for item in self.items:
            out += item.to_bytes()
        out += _TERMINATOR
        return bytes(out)

    @classmethod
    def from_bytes(
        cls, data: bytes, offset: int = 0
    ) -> tuple["LinkTargetIdList", int]:
        """Decode the list at *offset*; return ``(id_list, next_offset)``."""
        if offset + 2 > len(data):
            raise TruncatedDataError(f"IDListSize missing at offset {offset}")
        declared = struct.unpack_from("<H", data, offset)[0]
        pos = offset + 2
        end = pos + declared
        if end > len(data):
            raise TruncatedDataError(
                f"IDList declares {declared} bytes, only {len(data) - pos} available"
            )
        bounded = data[:end]
        items = []
        while True:
            if pos >= end:
                raise ParseError("IDList has no terminal ItemID")
            item, pos = ShellItem.read(bounded, pos)
            if item is None:
                break
            items.append(item)
        if pos != end:
            raise ParseError(
                f"IDList declares {declared} bytes but its items occupy "
                f"{pos - offset - 2}"
            )
        return cls(items=items), pos
