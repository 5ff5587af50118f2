"""Build Windows .lnk files from a target path -- pure struct packing."""

import logging
import ntpath
import os
import stat
from pathlib import Path
from typing import Any, BinaryIO

from ._types import TargetPath, Timestamp
from .errors import InvalidTargetError, LinkIOError
from .flags import (
    FileAttributeFlags,
    HotkeyFlags,
    HotkeyModifiers,
    LinkFlags,
    ShowCommand,
)
from .header import to_filetime
from .shelllink import ShellLink, write_to

__all__ = ["build_from_path", "build_link", "build_lnk", "new_link", "write_lnk", "write_to"]

logger = logging.getLogger(__name__)

# Bits owned by the sections themselves; never taken from ``link_flags``.
_SECTION_FLAGS = (
    LinkFlags.HAS_LINK_TARGET_ID_LIST
    | LinkFlags.HAS_LINK_INFO
    | LinkFlags.HAS_NAME
    | LinkFlags.HAS_RELATIVE_PATH
    | LinkFlags.HAS_WORKING_DIR
    | LinkFlags.HAS_ARGUMENTS
    | LinkFlags.HAS_ICON_LOCATION
    | LinkFlags.IS_UNICODE
)


def _check_range(field_name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise InvalidTargetError(f"{field_name} {value} out of range [{low}, {high}]")


def _filetime(field_name: str, value: Timestamp) -> int:
    try:
        return to_filetime(value)
    except (TypeError, ValueError) as exc:
        raise InvalidTargetError(f"Invalid {field_name}: {exc}") from exc


def new_link(
    target: TargetPath,
    *,
    is_directory: bool = False,
    file_size: int = 0,
    canonical: TargetPath | None = None,
) -> ShellLink:
    """Return a ShellLink for *target* with default settings.

    Directories only get the DIRECTORY attribute.  Files get an ID list, a
    ``./<name>`` relative path, the parent as working directory and the
    header file size.

    Args:
        target:       Absolute Windows path (``C:\\dir\\file.ext``).
        is_directory: Whether the target is a directory.
        file_size:    Target size in bytes (low 32 bits are stored).
        canonical:    Resolved path used for the relative path's file name;
                      defaults to *target*.
    """
    link = ShellLink()
    if is_directory:
        link.header.file_attributes = FileAttributeFlags.DIRECTORY
        logger.debug("directory link for %s", target)
        return link

    text = os.fspath(target)
    link.set_linktarget(text)
    name = ntpath.basename(os.fspath(canonical)) if canonical is not None else ""
    link.relative_path = "./" + (name or ntpath.basename(text))
    link.working_dir = ntpath.dirname(text)
    link.header.file_size = file_size & 0xFFFFFFFF
    logger.debug("file link for %s (%d bytes)", text, link.header.file_size)
    return link


def build_from_path(path: TargetPath) -> ShellLink:
    """Stat and canonicalize a local *path*, then build its ShellLink.

    Raises:
        LinkIOError: *path* does not exist or cannot be accessed.
        InvalidTargetError: *path* is not an absolute Windows path.
    """
    try:
        st = os.stat(path)
        canonical = Path(path).resolve(strict=True)
    except OSError as exc:
        raise LinkIOError(f"Cannot access {os.fspath(path)}: {exc}") from exc
    return new_link(
        path,
        is_directory=stat.S_ISDIR(st.st_mode),
        file_size=st.st_size,
        canonical=canonical,
    )


def build_link(
    target: TargetPath,
    name: str = "",
    relative_path: str = "",
    working_dir: str = "",
    arguments: str = "",
    icon_location: str = "",
    icon_index: int = 0,
    show_command: int = ShowCommand.NORMAL,
    file_size: int = 0,
    file_attributes: int | None = None,
    hotkey_vk: int = 0,
    hotkey_mod: int = 0,
    link_flags: int = 0,
    creation_time: Timestamp = None,
    access_time: Timestamp = None,
    write_time: Timestamp = None,
    is_directory: bool = False,
    is_unicode: bool = True,
) -> ShellLink:
    """Return a configured ShellLink; see :func:`build_lnk` for arguments."""
    if show_command not in (1, 3, 7):
        raise InvalidTargetError(
            f"Invalid show_command {show_command}; "
            f"must be NORMAL (1), MAXIMIZED (3), or MIN_NO_ACTIVE (7)"
        )
    _check_range("icon_index", icon_index, -(2**31), 2**31 - 1)
    _check_range("hotkey_vk", hotkey_vk, 0, 0xFF)
    _check_range("hotkey_mod", hotkey_mod, 0, 0xFF)
    _check_range("link_flags", int(link_flags), 0, 0xFFFFFFFF)
    if file_attributes is not None:
        _check_range("file_attributes", int(file_attributes), 0, 0xFFFFFFFF)
    ctime = _filetime("creation_time", creation_time)
    atime = _filetime("access_time", access_time)
    wtime = _filetime("write_time", write_time)

    link = new_link(target, is_directory=is_directory, file_size=file_size)
    hdr = link.header

    # Empty strings keep the defaults new_link chose (or leave the field out).
    if name:
        link.name = name
    if relative_path:
        link.relative_path = relative_path
    if working_dir:
        link.working_dir = working_dir
    if arguments:
        link.arguments = arguments
    if icon_location:
        link.icon_location = icon_location

    if file_attributes is None:
        file_attributes = (
            FileAttributeFlags.DIRECTORY if is_directory else FileAttributeFlags.ARCHIVE
        )
    hdr.file_attributes = FileAttributeFlags(file_attributes)
    hdr.creation_time = ctime
    hdr.access_time = atime
    hdr.write_time = wtime
    hdr.icon_index = icon_index
    hdr.show_command = ShowCommand(show_command)
    hdr.hotkey = HotkeyFlags(key=hotkey_vk, modifiers=HotkeyModifiers(hotkey_mod))
    hdr.update_link_flags(LinkFlags.IS_UNICODE, is_unicode)
    extra = int(link_flags) & ~int(_SECTION_FLAGS)
    if extra:
        hdr.link_flags = LinkFlags(int(hdr.link_flags) | extra)
    return link


def build_lnk(target: TargetPath, **options: Any) -> bytes:
    """Return the raw bytes of a complete .lnk file.

    Args:
        target:          Absolute Windows path (``C:\\dir\\file.ext``).
        name:            Tooltip / comment text (NAME_STRING).
        relative_path:   Relative path from the .lnk to the target.  Defaults
                         to ``./<file name>`` for files.
        working_dir:     Start-in directory.  Defaults to the target's parent.
        arguments:       Command-line arguments for the target.
        icon_location:   Icon source path.
        icon_index:      Icon resource index within icon_location.
        show_command:    NORMAL (1), MAXIMIZED (3) or MIN_NO_ACTIVE (7).
        file_size:       Target file size in bytes.
        file_attributes: FileAttributeFlags.  Defaults to ARCHIVE for files
                         and DIRECTORY for directories.
        hotkey_vk:       Virtual key code (e.g. 0x43 for 'C').
        hotkey_mod:      Modifier mask (0x01=SHIFT, 0x02=CTRL, 0x04=ALT).
        link_flags:      Additional LinkFlags bits to OR into the computed
                         flags.  Section presence bits and IsUnicode are
                         ignored here.
        creation_time:   Header CreationTime: None (unset), int (raw FILETIME
                         ticks) or timezone-aware datetime.
        access_time:     Header AccessTime.  Same types as creation_time.
        write_time:      Header WriteTime.  Same types as creation_time.
        is_directory:    Build a directory link (no ID list).
        is_unicode:      Write StringData as UTF-16LE (default) or cp1252.
    """
    return build_link(target, **options).to_bytes()


def write_lnk(path: str | Path | BinaryIO, **kwargs: Any) -> int:
    """Build a .lnk and write it to *path*.

    Accepts the same keyword arguments as :func:`build_lnk`.
    Returns the number of bytes written.
    """
    return write_to(build_link(**kwargs), path)
