# uasniffer/classifier.py

from collections import OrderedDict
from threading import Lock
from typing import List, Mapping, Optional
from uasniffer.config import settings
from uasniffer.languages import client_ip, preferred_language
from uasniffer.models import DeviceCategory, ParsedUserAgent, VersionedEntity
from uasniffer.parser import parse

# Quick lookup for already parsed User-Agent strings, least recently used first
KNOWN_USER_AGENTS: "OrderedDict[str, ParsedUserAgent]" = OrderedDict()
_known_lock = Lock()

LINUX_DISTROS = {
    "ArchLinux",
    "CentOS",
    "Debian",
    "Fedora",
    "Gentoo",
    "Mageia",
    "Mandriva",
    "Manjaro",
    "Mint",
    "openSUSE",
    "Red Hat",
    "Slackware",
    "SUSE",
    "Tizen",
    "Ubuntu",
    "Ubuntu Mobile",
}


def classify_user_agent_cached(user_agent: Optional[str]) -> ParsedUserAgent:
    """
    Parse with caching for repeated user agents.
    """
    user_agent = user_agent or ""
    if len(user_agent) > settings.classification_max_length:
        return parse(user_agent)

    with _known_lock:
        parsed = KNOWN_USER_AGENTS.get(user_agent)
        if parsed is not None:
            KNOWN_USER_AGENTS.move_to_end(user_agent)
            return parsed

    parsed = parse(user_agent)

    # Evict least recently used entries once over the limit
    with _known_lock:
        KNOWN_USER_AGENTS[user_agent] = parsed
        KNOWN_USER_AGENTS.move_to_end(user_agent)
        while len(KNOWN_USER_AGENTS) > settings.classification_cache_size:
            KNOWN_USER_AGENTS.popitem(last=False)

    return parsed


def _name(entity: Optional[VersionedEntity]) -> str:
    return entity.name if entity is not None else ""


def _version(entity: VersionedEntity) -> tuple:
    major = entity.major_version if entity.major_version is not None else -1
    minor = entity.minor_version if entity.minor_version is not None else -1
    return major, minor


class BrowserInfo:
    """
    Browser sniffing helper.

    Exposes the parsed User-Agent of a client as boolean tests, along with
    its preferred language and IP address. Every test reads the parser's
    result, nothing is guessed from the raw header.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        accept_language: Optional[str] = None,
        ip_address: Optional[str] = None,
        languages_filter: Optional[List[str]] = None,
    ):
        self.user_agent_string = user_agent
        self.accept_language = accept_language or ""
        self.ip_address = ip_address
        self.languages_filter = languages_filter if languages_filter is not None else settings.languages
        self.user_agent = classify_user_agent_cached(user_agent)
        self._preferred_language: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], remote_addr: Optional[str] = None) -> "BrowserInfo":
        """Build from request headers (lookups must be case-insensitive)"""
        return cls(
            user_agent=headers.get("user-agent"),
            accept_language=headers.get("accept-language"),
            ip_address=client_ip(headers.get("x-forwarded-for"), remote_addr),
        )

    def __repr__(self) -> str:
        return f"BrowserInfo(ua={self.user_agent_string!r})"

    # Parsed entities

    @property
    def device(self) -> str:
        return self.user_agent.device

    @property
    def browser(self) -> VersionedEntity:
        return self.user_agent.browser

    @property
    def rendering_engine(self) -> Optional[VersionedEntity]:
        return self.user_agent.rendering_engine

    @property
    def operating_system(self) -> VersionedEntity:
        return self.user_agent.operating_system

    # Device

    @property
    def is_robot(self) -> bool:
        return self.user_agent.device_category is DeviceCategory.ROBOT

    @property
    def is_mobile(self) -> bool:
        return self.user_agent.device_category is DeviceCategory.MOBILE

    @property
    def is_tablet(self) -> bool:
        return self.user_agent.device_category is DeviceCategory.TABLET

    @property
    def is_desktop(self) -> bool:
        return self.user_agent.device_category is DeviceCategory.DESKTOP

    @property
    def is_tv(self) -> bool:
        return self.user_agent.device_category is DeviceCategory.TV

    # Rendering engines

    @property
    def is_gecko(self) -> bool:
        return _name(self.rendering_engine) == "Gecko"

    @property
    def is_webkit(self) -> bool:
        return _name(self.rendering_engine).lower() == "applewebkit"

    @property
    def is_khtml(self) -> bool:
        return _name(self.rendering_engine) == "KHTML"

    @property
    def is_trident(self) -> bool:
        return _name(self.rendering_engine) == "Trident"

    @property
    def is_blink(self) -> bool:
        return _name(self.rendering_engine) == "Blink"

    @property
    def is_edge_html(self) -> bool:
        return _name(self.rendering_engine) == "EdgeHTML"

    @property
    def is_presto(self) -> bool:
        return _name(self.rendering_engine) == "Presto"

    # Browsers

    @property
    def is_chrome(self) -> bool:
        return self.browser.name in ("Chrome", "Chromium")

    @property
    def is_msie(self) -> bool:
        return self.browser.name == "MSIE"

    @property
    def is_firefox(self) -> bool:
        return self.browser.name in ("Firefox", "Iceweasel")

    @property
    def is_opera(self) -> bool:
        return self.browser.name in ("Opera", "Opera Mobile")

    @property
    def is_safari(self) -> bool:
        return self.browser.name == "Safari"

    @property
    def is_netscape(self) -> bool:
        return self.browser.name == "Netscape"

    @property
    def is_konqueror(self) -> bool:
        return self.browser.name == "Konqueror"

    @property
    def is_links(self) -> bool:
        return self.browser.name == "Links"

    @property
    def is_mozilla(self) -> bool:
        return self.browser.name == "Mozilla"

    # Operating systems

    @property
    def is_windows(self) -> bool:
        return self.operating_system.name.startswith("Windows")

    @property
    def is_osx(self) -> bool:
        return self.operating_system.name in ("OS X", "iOS")

    @property
    def is_linux(self) -> bool:
        name = self.operating_system.name
        return name.startswith("Linux") or name in LINUX_DISTROS

    @property
    def is_bsd(self) -> bool:
        return self.operating_system.name.endswith("BSD")

    @property
    def is_unix(self) -> bool:
        name = self.operating_system.name.lower()
        return "unix" in name or name in ("bsd", "sunos")

    @property
    def is_android(self) -> bool:
        return self.operating_system.name.startswith("Android")

    @property
    def is_ios(self) -> bool:
        return self.operating_system.name.startswith(("iOS", "iPhone", "iPad"))

    @property
    def is_symbian(self) -> bool:
        return self.operating_system.name.startswith("Symb")

    @property
    def is_blackberry(self) -> bool:
        name = self.operating_system.name
        return name.startswith("BlackBerry") or name == "PlayBook"

    # Features, reported when a consistent subset is supported

    @property
    def css3(self) -> bool:
        engine = self.rendering_engine
        if engine is None:
            return False
        major, minor = _version(engine)
        return (
            self.is_trident and major >= 9
            or self.is_edge_html
            or self.is_gecko and (major >= 2 or minor >= 9)
            or self.is_webkit and major >= 85
            or self.is_khtml and (major >= 4 or major == 3 and minor >= 4)
            or self.is_presto and major >= 2
        )

    @property
    def dom3(self) -> bool:
        engine = self.rendering_engine
        if engine is None:
            return False
        major, minor = _version(engine)
        return (
            self.is_edge_html
            or self.is_trident and major >= 9
            or self.is_gecko and (major >= 2 or minor >= 7)
            or self.is_webkit and major >= 601
        )

    # Language

    @property
    def preferred_language(self) -> str:
        if self._preferred_language is None:
            self._preferred_language = preferred_language(
                self.accept_language,
                self.languages_filter,
                settings.default_language,
            )
        return self._preferred_language
