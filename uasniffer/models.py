# uasniffer/models.py

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NamedTuple, Optional

# Versions are reported as signed 32-bit integers
MAX_VERSION = 2**31 - 1


class DeviceCategory(IntEnum):
    """Device types, in order of growing precedence"""
    UNKNOWN = 0
    DESKTOP = 1
    MOBILE = 2
    TABLET = 3
    TV = 4
    ROBOT = 5


class EntityKind(Enum):
    """How a known token influences the parsed result"""
    BROWSER = "BROWSER"
    BROWSER_AND_OS = "BROWSER_AND_OS"
    RENDERING_ENGINE = "RENDERING_ENGINE"
    FORCE_BROWSER = "FORCE_BROWSER"
    FORCE_OS = "FORCE_OS"
    IGNORE = "IGNORE"
    MAYBE_BROWSER = "MAYBE_BROWSER"
    MAYBE_OS = "MAYBE_OS"
    MAYBE_ROBOT = "MAYBE_ROBOT"
    MERGE = "MERGE"
    MERGE_OR_BROWSER = "MERGE_OR_BROWSER"
    MERGE_OR_OS = "MERGE_OR_OS"
    OS = "OS"
    ROBOT = "ROBOT"


class Classification(NamedTuple):
    """Keyword table entry"""
    kind: Optional[EntityKind]
    device: Optional[DeviceCategory]


@dataclass(frozen=True)
class VersionedEntity:
    """Browser, rendering engine or operating system"""
    name: str
    major_version: Optional[int] = None
    minor_version: Optional[int] = None

    @classmethod
    def parse(cls, name: str, major: Optional[str] = None, minor: Optional[str] = None) -> "VersionedEntity":
        """
        Build an entity from captured version digits.

        A major version without a minor one gets minor 0. Versions which
        cannot be represented leave the entity without any version.
        """
        if major is None:
            return cls(name)
        try:
            major_version = int(major)
            minor_version = int(minor) if minor is not None else 0
        except ValueError:
            # int() refuses overly long digit strings
            return cls(name)
        if major_version > MAX_VERSION or minor_version > MAX_VERSION:
            return cls(name)
        return cls(name, major_version, minor_version)

    def __str__(self) -> str:
        if self.major_version is None:
            return self.name
        return f"{self.name} {self.major_version}.{self.minor_version}"


@dataclass(frozen=True)
class ParsedUserAgent:
    """Structured result of a User-Agent parse"""
    device_category: DeviceCategory
    browser: VersionedEntity
    rendering_engine: Optional[VersionedEntity]
    operating_system: VersionedEntity

    @property
    def device(self) -> str:
        return self.device_category.name.lower()


# Returned when parsing failed unexpectedly
UNPARSED = ParsedUserAgent(
    device_category=DeviceCategory.UNKNOWN,
    browser=VersionedEntity("unknown"),
    rendering_engine=None,
    operating_system=VersionedEntity("unknown"),
)
