"""MS-SHLLINK constants and lookup tables shared by the codecs and the parser."""

# ---------------------------------------------------------------------------
# ANSI code page
# ---------------------------------------------------------------------------
# Non-unicode StringData is written in the "system default code page".  CP-1252
# is the Western/English default and a strict superset of ASCII.
ANSI_CODEPAGE = "cp1252"

# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
HEADER_SIZE = 0x4C

LINK_CLSID = b"\x01\x14\x02\x00\x00\x00\x00\x00\xc0\x00\x00\x00\x00\x00\x00\x46"

# ---------------------------------------------------------------------------
# Fixed shell items
# ---------------------------------------------------------------------------
# "This PC" root folder item: size 0x14, type 0x1F, sort index 0x50, then
# CLSID_MyComputer {20D04FE0-3AEA-1069-A2D8-08002B30309D}.
ROOT_FOLDER_SHELL = bytes(
    [
        0x14, 0x00, 0x1F, 0x50, 0xE0, 0x4F, 0xD0, 0x20, 0xEA, 0x3A,
        0x69, 0x10, 0xA2, 0xD8, 0x08, 0x00, 0x2B, 0x30, 0x30, 0x9D,
    ]
)  # fmt: skip

CLSID_MY_COMPUTER = ROOT_FOLDER_SHELL[4:20]

# Drive volume item: size 0x19, type 0x2F, "C:\", zero padded to 25 bytes.
DRIVE_ITEM_TEMPLATE = b"\x19\x00\x2f" + b"C:\\" + b"\x00" * 19
DRIVE_LETTER_OFFSET = 3

# ---------------------------------------------------------------------------
# File entry shell items
# ---------------------------------------------------------------------------
CLASS_DIRECTORY_ASCII = 0x31
CLASS_FILE_ASCII = 0x32
CLASS_DIRECTORY_WIDE = 0x35
CLASS_FILE_WIDE = 0x36

# size(2) + class type(1) + reserved(1) + file size(4) + mtime(4) + attrs(2)
FILE_ENTRY_FIXED_SIZE = 14

# ---------------------------------------------------------------------------
# Extension block (BEEF0004)
# ---------------------------------------------------------------------------
EXT_SIG = 0xBEEF0004
EXT_VERSION = 0x0008
EXT_VERSION_ID = 0x002A  # Windows 7 and later
EXT_FIRST_OFFSET = 0x0014
# size + version + signature + ctime + atime + version id + reserved + first offset
EXTENSION_FIXED_SIZE = 24

# ---------------------------------------------------------------------------
# StringData
# ---------------------------------------------------------------------------
# NAME_STRING, RELATIVE_PATH, WORKING_DIR and ICON_LOCATION must not exceed
# 260 characters; COMMAND_LINE_ARGUMENTS is bounded only by its u16 count.
MAX_STRING_LENGTH = 260

# ---------------------------------------------------------------------------
# Hotkey virtual keys
# ---------------------------------------------------------------------------
VK_KEYS = {
    **{k: chr(k) for k in range(0x30, 0x3A)},  # 0-9
    **{k: chr(k) for k in range(0x41, 0x5B)},  # A-Z
    **{k: f"F{k - 0x6F}" for k in range(0x70, 0x88)},  # F1-F24
    0x90: "NUMLOCK",
    0x91: "SCROLL",
}

# Keys MS-SHLLINK section 2.1.3 allows in the HotKey low byte.
HOTKEY_VK_VALID = frozenset(VK_KEYS)

# ---------------------------------------------------------------------------
# ExtraData block signatures (MS-SHLLINK 2.5)
# ---------------------------------------------------------------------------
EXTRA_SIGS = {
    0xA0000001: "EnvironmentVariableDataBlock",
    0xA0000002: "ConsoleDataBlock",
    0xA0000003: "TrackerDataBlock",
    0xA0000004: "ConsoleFEDataBlock",
    0xA0000005: "SpecialFolderDataBlock",
    0xA0000006: "DarwinDataBlock",
    0xA0000007: "IconEnvironmentDataBlock",
    0xA0000008: "ShimDataBlock",
    0xA0000009: "PropertyStoreDataBlock",
    0xA000000B: "KnownFolderDataBlock",
    0xA000000C: "VistaAndAboveIDListDataBlock",
}
