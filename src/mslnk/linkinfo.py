"""LinkInfo (MS-SHLLINK 2.3): information used to resolve a moved target.

Only the data model is provided.  Writing LinkInfo is not supported; a decoder
can step over the section using its size field.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag

from .errors import ParseError, TruncatedDataError

# LinkInfoSize, LinkInfoHeaderSize, LinkInfoFlags, VolumeIDOffset,
# LocalBasePathOffset, CommonNetworkRelativeLinkOffset, CommonPathSuffixOffset
_MIN_LINK_INFO_SIZE = 0x1C


class LinkInfoFlags(IntFlag):
    # VolumeID and LocalBasePath are present (plus LocalBasePathUnicode when
    # LinkInfoHeaderSize >= 0x24).
    VOLUME_ID_AND_LOCAL_BASE_PATH = 0x1
    # CommonNetworkRelativeLink is present.
    COMMON_NETWORK_RELATIVE_LINK_AND_PATH_SUFFIX = 0x2


class CommonNetworkRelativeLinkFlags(IntFlag):
    VALID_DEVICE = 0x1
    VALID_NET_TYPE = 0x2


class NetworkProviderType(IntEnum):
    """WNNC_NET_* network provider types."""

    LANMAN = 0x00020000
    AVID = 0x001A0000
    DOCUSPACE = 0x001B0000
    MANGOSOFT = 0x001C0000
    SERNET = 0x001D0000
    RIVERFRONT1 = 0x001E0000
    RIVERFRONT2 = 0x001F0000
    DECORB = 0x00200000
    PROTSTOR = 0x00210000
    FJ_REDIR = 0x00220000
    DISTINCT = 0x00230000
    TWINS = 0x00240000
    RDR2SAMPLE = 0x00250000
    CSC = 0x00260000
    THREE_IN_ONE = 0x00270000
    EXTENDNET = 0x00290000
    STAC = 0x002A0000
    FOXBAT = 0x002B0000
    YAHOO = 0x002C0000
    EXIFS = 0x002D0000
    DAV = 0x002E0000
    KNOWARE = 0x002F0000
    OBJECT_DIRE = 0x00300000
    MASFAX = 0x00310000
    HOB_NFS = 0x00320000
    SHIVA = 0x00330000
    IBMAL = 0x00340000
    LOCK = 0x00350000
    TERMSRV = 0x00360000
    SRT = 0x00370000
    QUINCY = 0x00380000
    OPENAFS = 0x00390000
    AVID1 = 0x003A0000
    DFS = 0x003B0000
    KWNP = 0x003C0000
    ZENWORKS = 0x003D0000
    DRIVEONWEB = 0x003E0000
    VMWARE = 0x003F0000
    RSFX = 0x00400000
    MFILES = 0x00410000
    MS_NFS = 0x00420000
    GOOGLE = 0x00430000


@dataclass(slots=True)
class CommonNetworkRelativeLink:
    """Network location of the target (share path and mapped device)."""

    flags: CommonNetworkRelativeLinkFlags = CommonNetworkRelativeLinkFlags(0)
    network_provider_type: NetworkProviderType | None = None
    net_name: str = ""
    device_name: str = ""
    net_name_unicode: str | None = None
    device_name_unicode: str | None = None

    def to_bytes(self) -> bytes:
        raise NotImplementedError(
            "CommonNetworkRelativeLink serialization is not supported"
        )


@dataclass(slots=True)
class LinkInfo:
    size: int = 0
    link_info_flags: LinkInfoFlags = LinkInfoFlags(0)
    local_base_path: str | None = None
    common_network_relative_link: CommonNetworkRelativeLink | None = None
    common_path_suffix: str = ""
    local_base_path_unicode: str | None = None
    common_path_suffix_unicode: str | None = None

    def to_bytes(self) -> bytes:
        raise NotImplementedError("LinkInfo serialization is not supported")

    @classmethod
    def skip(cls, data: bytes, offset: int) -> tuple["LinkInfo", int]:
        """Read LinkInfoSize and flags at *offset*; return ``(info, next_offset)``."""
        if offset + 4 > len(data):
            raise TruncatedDataError(f"LinkInfoSize missing at offset {offset}")
        size = struct.unpack_from("<I", data, offset)[0]
        if size < _MIN_LINK_INFO_SIZE:
            raise ParseError(f"LinkInfoSize {size} is below the 0x1C minimum")
        if offset + size > len(data):
            raise TruncatedDataError(
                f"LinkInfo declares {size} bytes, only {len(data) - offset} available"
            )
        flags = struct.unpack_from("<I", data, offset + 8)[0]
        return cls(size=size, link_info_flags=LinkInfoFlags(flags)), offset + size
