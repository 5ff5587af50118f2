"""Shared fixtures for mslnk tests."""

import pytest

from mslnk.builder import build_lnk
from mslnk.linktarget import LinkTargetIdList


@pytest.fixture
def simple_target():
    return r"C:\a\b.txt"


@pytest.fixture
def simple_lnk_bytes(simple_target):
    """A minimal .lnk targeting C:\\a\\b.txt."""
    return build_lnk(simple_target)


@pytest.fixture
def simple_id_list(simple_target):
    return LinkTargetIdList.from_target(simple_target)


@pytest.fixture
def full_lnk_bytes():
    """A .lnk with every StringData field populated."""
    return build_lnk(
        r"C:\Windows\notepad.exe",
        name="Notepad",
        relative_path=r"..\Windows\notepad.exe",
        working_dir=r"C:\Windows",
        arguments="--flag value",
        icon_location=r"C:\Windows\notepad.exe",
        icon_index=2,
        file_size=201216,
        hotkey_vk=0x43,
        hotkey_mod=0x02,
    )
