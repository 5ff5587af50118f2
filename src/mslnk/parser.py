"""Decode .lnk files into a ShellLink and render them for humans."""

import uuid
from pathlib import Path

from ._constants import CLSID_MY_COMPUTER, HEADER_SIZE
from .errors import LinkIOError, ParseError
from .extradata import parse_extra_data
from .flags import LinkFlags, flag_names
from .header import ShellLinkHeader, filetime_to_datetime
from .linkinfo import LinkInfo
from .linktarget import LinkTargetIdList
from .shelllink import STRING_FIELDS, ShellLink
from .shellitem import FileEntryItem, SegmentKind, ShellItem
from .stringdata import decode_string

_FILE_ENTRY_TYPES = frozenset(int(kind) for kind in SegmentKind)

_KNOWN_CLSIDS = {
    CLSID_MY_COMPUTER: "My Computer",
}


def parse_lnk(source: str | Path | bytes) -> ShellLink:
    """Parse a .lnk file and return a :class:`ShellLink`.

    LinkInfo is stepped over by its size and kept as a stub; ExtraData blocks
    are classified but their payloads are not interpreted.

    Args:
        source: A file path (str or Path) or raw bytes of a .lnk file.
    """
    if isinstance(source, (str, Path)):
        try:
            data = Path(source).read_bytes()
        except OSError as exc:
            raise LinkIOError(f"Cannot read {source}: {exc}") from exc
    else:
        data = bytes(source)

    header = ShellLinkHeader.from_bytes(data)
    link = ShellLink(header)
    flags = header.link_flags
    pos = HEADER_SIZE

    # -- IDList --
    if flags & LinkFlags.HAS_LINK_TARGET_ID_LIST:
        link.linktarget_id_list, pos = LinkTargetIdList.from_bytes(data, pos)

    # -- LinkInfo --
    if flags & LinkFlags.HAS_LINK_INFO:
        link.link_info, pos = LinkInfo.skip(data, pos)

    # -- StringData --
    is_unicode = link.is_unicode
    for attr, flag, _max_length in STRING_FIELDS:
        if flags & flag:
            value, pos = decode_string(data, pos, is_unicode)
            setattr(link, attr, value)

    # -- ExtraData --
    link.extra_data = parse_extra_data(data, pos)
    return link


def describe_item(item: ShellItem) -> str:
    """One-line description of an ID list item."""
    body = item.payload
    if not body:
        return "Empty"
    type_byte = body[0]

    if type_byte == 0x1F and len(body) >= 18:
        clsid = bytes(body[2:18])
        name = _KNOWN_CLSIDS.get(clsid, "Unknown")
        return f"Root: {{{uuid.UUID(bytes_le=clsid)}}} ({name})"

    if type_byte & 0x70 == 0x20:
        letter = body[1:4].split(b"\x00", 1)[0].decode("ascii", errors="replace")
        return f"Drive: {letter}"

    if type_byte in _FILE_ENTRY_TYPES:
        try:
            entry = FileEntryItem.from_shell_item(item)
        except ParseError:
            return f"FileEntry: type=0x{type_byte:02X} (undecodable)"
        label = "Dir" if entry.kind.is_directory else "File"
        long_name = entry.extension_block.name
        if long_name and long_name != entry.entry_name:
            return f'{label}: "{entry.entry_name}" (long: "{long_name}")'
        return f'{label}: "{entry.entry_name}"'

    return f"Unknown: type=0x{type_byte:02X}"


def _time_str(ticks: int) -> str:
    dt = filetime_to_datetime(ticks)
    if dt is None:
        return "0 (not set)"
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_lnk(link: ShellLink) -> str:
    """Return a human-readable string representation of *link*."""
    hdr = link.header
    lines: list[str] = []

    lines.append("--- HEADER ---")
    lines.append(f"  LinkFlags:       0x{int(hdr.link_flags):08X}")
    for name in flag_names(hdr.link_flags):
        lines.append(f"    - {name}")
    lines.append(f"  FileAttributes:  0x{int(hdr.file_attributes):08X}")
    lines.append(f"  CreationTime:    {_time_str(hdr.creation_time)}")
    lines.append(f"  AccessTime:      {_time_str(hdr.access_time)}")
    lines.append(f"  WriteTime:       {_time_str(hdr.write_time)}")
    lines.append(f"  FileSize:        {hdr.file_size} (0x{hdr.file_size:08X})")
    lines.append(f"  IconIndex:       {hdr.icon_index}")
    lines.append(
        f"  ShowCommand:     {int(hdr.show_command)} ({hdr.show_command.name})"
    )
    lines.append(f"  HotKey:          {hdr.hotkey or 'None'}")

    id_list = link.linktarget_id_list
    if id_list is not None:
        lines.append("")
        lines.append(f"--- LINK TARGET ID LIST (size={id_list.size}) ---")
        for i, item in enumerate(id_list.items):
            lines.append(f"  Item[{i}]: size={item.size}  {describe_item(item)}")

    if link.link_info is not None:
        lines.append("")
        lines.append("--- LINK INFO ---")
        lines.append(f"  Size:            {link.link_info.size} (not decoded)")

    labels = {
        "name": "Name",
        "relative_path": "RelativePath",
        "working_dir": "WorkingDir",
        "arguments": "Arguments",
        "icon_location": "IconLocation",
    }
    strings = [(labels[attr], getattr(link, attr)) for attr, _f, _m in STRING_FIELDS]
    if any(value is not None for _label, value in strings):
        lines.append("")
        lines.append("--- STRING DATA ---")
        for label, value in strings:
            if value is not None:
                lines.append(f'  {label + ":":<19}"{value}"')

    if link.extra_data:
        lines.append("")
        lines.append("--- EXTRA DATA ---")
        for block in link.extra_data:
            lines.append(
                f"  Block: size={block.size} sig=0x{block.signature:08X} "
                f"({block.kind.block_name})"
            )

    return "\n".join(lines)
