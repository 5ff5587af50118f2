"""Bit-level option sets carried by the ShellLinkHeader (MS-SHLLINK 2.1)."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from ._constants import VK_KEYS


class LinkFlags(IntFlag):
    """Which optional structures are present and how strings are encoded."""

    HAS_LINK_TARGET_ID_LIST = 1 << 0
    HAS_LINK_INFO = 1 << 1
    HAS_NAME = 1 << 2
    HAS_RELATIVE_PATH = 1 << 3
    HAS_WORKING_DIR = 1 << 4
    HAS_ARGUMENTS = 1 << 5
    HAS_ICON_LOCATION = 1 << 6
    IS_UNICODE = 1 << 7
    FORCE_NO_LINK_INFO = 1 << 8
    HAS_EXP_STRING = 1 << 9
    RUN_IN_SEPARATE_PROCESS = 1 << 10
    UNUSED1 = 1 << 11
    HAS_DARWIN_ID = 1 << 12
    RUN_AS_USER = 1 << 13
    HAS_EXP_ICON = 1 << 14
    NO_PIDL_ALIAS = 1 << 15
    UNUSED2 = 1 << 16
    RUN_WITH_SHIM_LAYER = 1 << 17
    FORCE_NO_LINK_TRACK = 1 << 18
    ENABLE_TARGET_METADATA = 1 << 19
    DISABLE_LINK_PATH_TRACKING = 1 << 20
    DISABLE_KNOWN_FOLDER_TRACKING = 1 << 21
    DISABLE_KNOWN_FOLDER_ALIAS = 1 << 22
    ALLOW_LINK_TO_LINK = 1 << 23
    UNALIAS_ON_SAVE = 1 << 24
    PREFER_ENVIRONMENT_PATH = 1 << 25
    KEEP_LOCAL_ID_LIST_FOR_UNC_TARGET = 1 << 26


class FileAttributeFlags(IntFlag):
    """Attributes of the link target (section 2.1.2).

    RESERVED1 and RESERVED2 MUST be zero.
    """

    READONLY = 0x0001
    HIDDEN = 0x0002
    SYSTEM = 0x0004
    RESERVED1 = 0x0008
    DIRECTORY = 0x0010
    ARCHIVE = 0x0020
    RESERVED2 = 0x0040
    NORMAL = 0x0080
    TEMPORARY = 0x0100
    SPARSE_FILE = 0x0200
    REPARSE_POINT = 0x0400
    COMPRESSED = 0x0800
    OFFLINE = 0x1000
    NOT_CONTENT_INDEXED = 0x2000
    ENCRYPTED = 0x4000


RESERVED_ATTRIBUTES = FileAttributeFlags.RESERVED1 | FileAttributeFlags.RESERVED2


class HotkeyModifiers(IntFlag):
    SHIFT = 0x01
    CONTROL = 0x02
    ALT = 0x04


_MODIFIER_NAMES = (
    (HotkeyModifiers.SHIFT, "SHIFT"),
    (HotkeyModifiers.CONTROL, "CTRL"),
    (HotkeyModifiers.ALT, "ALT"),
)


class ShowCommand(IntEnum):
    """Expected window state of the launched application."""

    NORMAL = 1
    MAXIMIZED = 3
    MIN_NO_ACTIVE = 7

    @classmethod
    def from_int(cls, value: int) -> "ShowCommand":
        """All values other than 3 and 7 MUST be treated as NORMAL."""
        try:
            return cls(value)
        except ValueError:
            return cls.NORMAL


@dataclass(slots=True)
class HotkeyFlags:
    """Keyboard shortcut: virtual key in the low byte, modifiers in the high."""

    key: int = 0
    modifiers: HotkeyModifiers = HotkeyModifiers(0)

    def to_int(self) -> int:
        return (self.key & 0xFF) | (int(self.modifiers) & 0xFF) << 8

    @classmethod
    def from_int(cls, value: int) -> "HotkeyFlags":
        return cls(key=value & 0xFF, modifiers=HotkeyModifiers((value >> 8) & 0xFF))

    def __bool__(self) -> bool:
        return bool(self.key or self.modifiers)

    def __str__(self) -> str:
        parts = [name for bit, name in _MODIFIER_NAMES if self.modifiers & bit]
        if self.key:
            parts.append(VK_KEYS.get(self.key, f"0x{self.key:02X}"))
        return "+".join(parts)


_LINK_FLAG_NAMES = {member.value: name for name, member in LinkFlags.__members__.items()}


def flag_names(flags: int) -> list[str]:
    """Names of the LinkFlags bits set in *flags*, lowest bit first."""
    return [
        _LINK_FLAG_NAMES.get(1 << bit, f"BIT{bit}")
        for bit in range(32)
        if flags & (1 << bit)
    ]
