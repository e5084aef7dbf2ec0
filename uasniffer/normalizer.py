# uasniffer/normalizer.py

from uasniffer.models import DeviceCategory, ParsedUserAgent, VersionedEntity
from uasniffer.resolver import Resolution

# Windows releases reported through their marketing year
WINDOWS_RELEASES = {
    95: VersionedEntity("Windows 95", 4, 0),
    98: VersionedEntity("Windows 98", 4, 90),
    2000: VersionedEntity("Windows 2000", 5, 0),
}

ROBOT = VersionedEntity("robot", 0, 0)
UNKNOWN = VersionedEntity("unknown", 0, 0)


def normalize(resolution: Resolution) -> ParsedUserAgent:
    """Apply defaults and known quirks once all tokens have been resolved"""
    device = resolution.device_category
    browser = resolution.browser
    engine = resolution.rendering_engine
    os = resolution.operating_system

    if os is not None and os.name == "Windows" and os.major_version in WINDOWS_RELEASES:
        os = WINDOWS_RELEASES[os.major_version]

    if browser is None:
        if device is DeviceCategory.ROBOT or resolution.maybe_robot:
            browser = ROBOT
            device = DeviceCategory.ROBOT
        elif os is not None and os.name == "Symbian":
            browser = VersionedEntity("Nokia Browser", os.major_version, os.minor_version)
        else:
            browser = UNKNOWN

    if os is None:
        if device is DeviceCategory.ROBOT or resolution.maybe_robot:
            os = ROBOT
            device = DeviceCategory.ROBOT
        else:
            os = UNKNOWN

    if device is DeviceCategory.UNKNOWN:
        device = DeviceCategory.MOBILE if os.name == "Android" else DeviceCategory.DESKTOP

    return ParsedUserAgent(
        device_category=device,
        browser=browser,
        rendering_engine=engine,
        operating_system=os,
    )
