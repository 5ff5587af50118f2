"""ShellLink: the in-memory shortcut and its serializer."""

import logging
from pathlib import Path
from typing import BinaryIO

from ._constants import MAX_STRING_LENGTH
from .errors import InvariantError, LinkIOError
from .extradata import ExtraData
from .flags import LinkFlags
from .header import ShellLinkHeader
from .linkinfo import LinkInfo
from .linktarget import LinkTargetIdList
from .stringdata import encode_string

logger = logging.getLogger(__name__)

# (attribute, gating flag, max characters; 0 = u16 count only), in file order
STRING_FIELDS = (
    ("name", LinkFlags.HAS_NAME, MAX_STRING_LENGTH),
    ("relative_path", LinkFlags.HAS_RELATIVE_PATH, MAX_STRING_LENGTH),
    ("working_dir", LinkFlags.HAS_WORKING_DIR, MAX_STRING_LENGTH),
    ("arguments", LinkFlags.HAS_ARGUMENTS, 0),
    ("icon_location", LinkFlags.HAS_ICON_LOCATION, MAX_STRING_LENGTH),
)


def _flag_gated(attr: str, flag: LinkFlags, doc: str) -> property:
    """Property whose setter keeps *flag* in step with the value's presence."""
    slot = "_" + attr

    def getter(self):
        return getattr(self, slot)

    def setter(self, value):
        self._header.update_link_flags(flag, value is not None)
        setattr(self, slot, value)

    return property(getter, setter, doc=doc)


class ShellLink:
    """A shell link: header, optional ID list, LinkInfo and StringData.

    Every optional part is exposed as a property; assigning ``None`` clears
    the matching LinkFlags bit, assigning a value sets it.
    """

    def __init__(self, header: ShellLinkHeader | None = None) -> None:
        self._header = header if header is not None else ShellLinkHeader()
        self._linktarget_id_list: LinkTargetIdList | None = None
        self._link_info: LinkInfo | None = None
        self._name: str | None = None
        self._relative_path: str | None = None
        self._working_dir: str | None = None
        self._arguments: str | None = None
        self._icon_location: str | None = None
        self.extra_data: list[ExtraData] = []

    @property
    def header(self) -> ShellLinkHeader:
        return self._header

    linktarget_id_list = _flag_gated(
        "linktarget_id_list",
        LinkFlags.HAS_LINK_TARGET_ID_LIST,
        "Target as a LinkTargetIdList.",
    )
    link_info = _flag_gated("link_info", LinkFlags.HAS_LINK_INFO, "LinkInfo section.")
    name = _flag_gated("name", LinkFlags.HAS_NAME, "Description / tooltip.")
    relative_path = _flag_gated(
        "relative_path", LinkFlags.HAS_RELATIVE_PATH, "Path relative to the .lnk."
    )
    working_dir = _flag_gated(
        "working_dir", LinkFlags.HAS_WORKING_DIR, "Start-in directory."
    )
    arguments = _flag_gated(
        "arguments", LinkFlags.HAS_ARGUMENTS, "Command-line arguments."
    )
    icon_location = _flag_gated(
        "icon_location", LinkFlags.HAS_ICON_LOCATION, "Icon source path."
    )

    @property
    def is_unicode(self) -> bool:
        return bool(self._header.link_flags & LinkFlags.IS_UNICODE)

    def set_linktarget(self, target) -> None:
        """Build the ID list for *target*, creating it if absent."""
        id_list = self._linktarget_id_list or LinkTargetIdList()
        id_list.set_linktarget(target)
        self.linktarget_id_list = id_list

    def to_bytes(self) -> bytes:
        """Serialize header, ID list, LinkInfo and StringData, in that order.

        ExtraData is not written.
        """
        flags = self._header.link_flags
        out = bytearray(self._header.to_bytes())
        logger.debug("header: flags=0x%08X", int(flags))

        if flags & LinkFlags.HAS_LINK_TARGET_ID_LIST:
            if self._linktarget_id_list is None:
                raise InvariantError(
                    "HasLinkTargetIDList is set but no ID list is present"
                )
            data = self._linktarget_id_list.to_bytes()
            logger.debug(
                "idlist: %d items, %d bytes",
                len(self._linktarget_id_list.items),
                len(data),
            )
            out += data

        if flags & LinkFlags.HAS_LINK_INFO:
            if self._link_info is None:
                raise InvariantError("HasLinkInfo is set but no LinkInfo is present")
            out += self._link_info.to_bytes()

        is_unicode = self.is_unicode
        for attr, flag, max_length in STRING_FIELDS:
            if not flags & flag:
                continue
            value = getattr(self, attr)
            if value is None:
                raise InvariantError(f"{flag.name} is set but {attr} is missing")
            out += encode_string(value, is_unicode, max_length=max_length)
            logger.debug("%s: %d characters", attr, len(value))

        return bytes(out)

    def create_lnk(self, destination: str | Path | BinaryIO) -> int:
        """Write this link to *destination*; return the byte count."""
        return write_to(self, destination)

    def __repr__(self) -> str:
        parts = [f"flags=0x{int(self._header.link_flags):08X}"]
        if self._linktarget_id_list is not None:
            parts.append(f"items={len(self._linktarget_id_list.items)}")
        for attr, _flag, _max in STRING_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                parts.append(f"{attr}={value!r}")
        return f"ShellLink({', '.join(parts)})"


def write_to(link: ShellLink, destination: str | Path | BinaryIO) -> int:
    """Serialize *link* and write it in one call.

    *destination* is a path (parent directories are created) or a binary
    file object.  Nothing is written if serialization fails.
    """
    data = link.to_bytes()
    try:
        if isinstance(destination, (str, Path)):
            path = Path(destination)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as fh:
                fh.write(data)
        else:
            destination.write(data)
    except OSError as exc:
        raise LinkIOError(f"Cannot write {destination}: {exc}") from exc
    logger.debug("wrote %d bytes to %s", len(data), destination)
    return len(data)
