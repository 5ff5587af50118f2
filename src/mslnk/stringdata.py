"""StringData records (MS-SHLLINK 2.4): counted, unterminated strings.

The encoding is selected by the header's IsUnicode flag, which callers pass
in explicitly.
"""

import struct

from ._constants import ANSI_CODEPAGE
from .errors import InvalidTargetError, TruncatedDataError


def encode_string(value: str, is_unicode: bool, *, max_length: int = 0) -> bytes:
    """Return the counted record for *value*.

    Unicode records are a uint16 count of UTF-16 code units followed by the
    UTF-16LE bytes; unpaired surrogates pass through as they do in NTFS
    names.  ANSI records are a uint16 byte count followed by the
    code-page bytes; characters the code page cannot represent become ``?``.

    Args:
        value: The string to encode.
        is_unicode: The IsUnicode link flag.
        max_length: Maximum character count (0 = bounded only by the uint16
            count field).
    """
    if max_length and len(value) > max_length:
        raise InvalidTargetError(
            f"StringData field exceeds {max_length}-character limit "
            f"(got {len(value)} characters)"
        )
    if is_unicode:
        encoded = value.encode("utf-16-le", errors="surrogatepass")
        count = len(encoded) // 2
    else:
        encoded = value.encode(ANSI_CODEPAGE, errors="replace")
        count = len(encoded)
    if count > 0xFFFF:
        raise InvalidTargetError(f"StringData field too long ({count} units)")
    return struct.pack("<H", count) + encoded


def decode_string(data: bytes, offset: int, is_unicode: bool) -> tuple[str, int]:
    """Decode the record at *offset*; return ``(value, next_offset)``."""
    if offset + 2 > len(data):
        raise TruncatedDataError(f"StringData count missing at offset {offset}")
    count = struct.unpack_from("<H", data, offset)[0]
    start = offset + 2
    end = start + (count * 2 if is_unicode else count)
    if end > len(data):
        raise TruncatedDataError(
            f"StringData at offset {offset} needs {end - start} bytes, "
            f"only {len(data) - start} available"
        )
    raw = data[start:end]
    if is_unicode:
        return raw.decode("utf-16-le", errors="surrogatepass"), end
    return raw.decode(ANSI_CODEPAGE, errors="replace"), end
