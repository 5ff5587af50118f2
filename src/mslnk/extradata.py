"""ExtraData blocks (MS-SHLLINK 2.5), classified by signature.

ExtraData is read only: blocks are recognised and kept as raw payloads, and
are never written back.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum

from ._constants import EXTRA_SIGS
from .errors import ParseError, TruncatedDataError


class ExtraDataKind(IntEnum):
    ENVIRONMENT_PROPS = 0xA0000001
    CONSOLE_PROPS = 0xA0000002
    TRACKER_PROPS = 0xA0000003
    CONSOLE_FE_PROPS = 0xA0000004
    SPECIAL_FOLDER_PROPS = 0xA0000005
    DARWIN_PROPS = 0xA0000006
    ICON_ENVIRONMENT_PROPS = 0xA0000007
    SHIM_PROPS = 0xA0000008
    PROPERTY_STORE_PROPS = 0xA0000009
    KNOWN_FOLDER_PROPS = 0xA000000B
    VISTA_AND_ABOVE_ID_LIST_PROPS = 0xA000000C

    @property
    def block_name(self) -> str:
        return EXTRA_SIGS[self.value]


@dataclass(slots=True)
class ExtraData:
    """One block: its kind and the bytes after BlockSize and BlockSignature."""

    kind: ExtraDataKind
    payload: bytes = b""

    @property
    def signature(self) -> int:
        return int(self.kind)

    @property
    def size(self) -> int:
        return len(self.payload) + 8

    @classmethod
    def from_bytes(cls, block: bytes) -> "ExtraData":
        if len(block) < 8:
            raise TruncatedDataError("ExtraData block shorter than its 8-byte header")
        size, sig = struct.unpack_from("<II", block, 0)
        if size != len(block):
            raise ParseError(
                f"ExtraData block declares {size} bytes but {len(block)} were supplied"
            )
        try:
            kind = ExtraDataKind(sig)
        except ValueError:
            raise ParseError(f"Unknown ExtraData signature 0x{sig:08X}") from None
        return cls(kind=kind, payload=bytes(block[8:]))


def parse_extra_data(data: bytes, offset: int = 0) -> list[ExtraData]:
    """Classify every block from *offset* up to the terminal block."""
    blocks = []
    pos = offset
    while pos + 4 <= len(data):
        block_size = struct.unpack_from("<I", data, pos)[0]
        if block_size < 4:
            break  # TerminalBlock
        if pos + block_size > len(data):
            raise TruncatedDataError(
                f"ExtraData block at offset {pos} declares {block_size} bytes, "
                f"only {len(data) - pos} available"
            )
        blocks.append(ExtraData.from_bytes(data[pos : pos + block_size]))
        pos += block_size
    return blocks
