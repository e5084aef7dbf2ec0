# uasniffer/resolver.py

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple
from uasniffer.keywords import KeywordTable
from uasniffer.models import DeviceCategory, EntityKind, VersionedEntity
from uasniffer.tokenizer import Token

# Lookahead characters after which a bare word is not merged with the next one
TERMINATORS = "(;/)"

BROWSER_ALIASES = {
    "crios": "Chrome",
    "edg": "Edge",
    "edga": "Edge",
    "edgios": "Edge",
    "fxios": "Firefox",
    "navigator": "Netscape",
    "nokia5250": "Nokia Browser",
    "nokiabrowser": "Nokia Browser",
    "opera mobi": "Opera Mobile",
    "opr": "Opera",
}

OS_ALIASES = {
    "android": "Android",
    "bada": "Bada",
    "bb10": "BlackBerry",
    "blackberry": "BlackBerry",
    "cros": "Chrome OS",
    "hpwos": "WebOS",
    "ios": "iOS",
    "ipad": "iOS",
    "iphone": "iOS",
    "iphone os": "iOS",
    "ipod": "iOS",
    "kfthwi": "Kindle",
    "kftt": "Kindle",
    "mac os x": "OS X",
    "macos x": "OS X",
    "rhel": "Red Hat",
    "series40": "Symbian",
    "series60": "Symbian",
    "series80": "Symbian",
    "series90": "Symbian",
    "series 40": "Symbian",
    "series 60": "Symbian",
    "series 80": "Symbian",
    "series 90": "Symbian",
    "symbianos": "Symbian",
    "symbos": "Symbian",
    "tizen": "Tizen",
    "unix": "Unix",
    "webos": "WebOS",
    "win32": "Windows",
    "win95": "Windows",
    "win98": "Windows",
    "windows nt": "Windows",
    "winnt": "Windows",
}

# Tokens carrying their version in their name
OS_EMBEDDED_VERSIONS = {
    "win95": "95",
    "win98": "98",
}

ROBOT_SUFFIXES = ("bot", "crawler", "spider", "agent", "validator")

PendingMerge = Tuple[str, Optional[EntityKind]]


@dataclass
class Resolution:
    """Result accumulated while walking the tokens of one User-Agent"""
    device_category: DeviceCategory = DeviceCategory.UNKNOWN
    browser: Optional[VersionedEntity] = None
    rendering_engine: Optional[VersionedEntity] = None
    operating_system: Optional[VersionedEntity] = None
    maybe_robot: bool = False

    def set_browser(self, name: str, major: Optional[str] = None, minor: Optional[str] = None) -> None:
        name = BROWSER_ALIASES.get(name.lower(), name)
        self.browser = VersionedEntity.parse(name, major, minor)
        if name == "Edge" and self.rendering_engine is None:
            self.rendering_engine = VersionedEntity.parse("EdgeHTML", major, minor)

    def set_operating_system(self, name: str, major: Optional[str] = None, minor: Optional[str] = None) -> None:
        key = name.lower()
        if major is None and key in OS_EMBEDDED_VERSIONS:
            major = OS_EMBEDDED_VERSIONS[key]
        name = OS_ALIASES.get(key, name)
        if name.startswith("BlackBerry"):
            name = "BlackBerry"
        self.operating_system = VersionedEntity.parse(name, major, minor)

    def set_rendering_engine(self, name: str, major: Optional[str] = None, minor: Optional[str] = None) -> None:
        self.rendering_engine = VersionedEntity.parse(name, major, minor)

    def promote_device(self, category: DeviceCategory) -> None:
        """Only overwrite device categories of lower precedence"""
        if category > self.device_category:
            self.device_category = category


def _accepts(target: EntityKind, kind: Optional[EntityKind]) -> bool:
    """Whether a merged name classified as `kind` completes a merge aiming at `target`"""
    if kind is None:
        return False
    if kind is target:
        return True
    if target is EntityKind.BROWSER:
        return kind in (EntityKind.MAYBE_BROWSER, EntityKind.FORCE_BROWSER)
    if target is EntityKind.OS:
        return kind in (EntityKind.MAYBE_OS, EntityKind.FORCE_OS)
    return False


def _commit(result: Resolution, name: str, target: EntityKind) -> None:
    """Settle a buffered name on its own, without version"""
    if target is EntityKind.BROWSER:
        result.set_browser(name)
    else:
        result.set_operating_system(name)


def _maybe_browser_name(name: str, current: Optional[VersionedEntity]) -> Optional[str]:
    """Resolve generic browser tokens against the browser found so far"""
    lowered = name.lower()
    current_name = current.name if current is not None else None
    if lowered == "rv":
        return "Mozilla" if current_name == "Mozilla" else None
    if lowered == "version":
        if current_name is not None and current_name.startswith("Opera"):
            return current_name
        if current_name == "Mozilla":
            return "Safari"
        return None
    if lowered == "safari" and current_name == "Safari":
        return None
    return name


def _retag_mobile(result: Resolution) -> None:
    """A standalone 'Mobile' refines desktop-looking systems"""
    os = result.operating_system
    if os is None:
        return
    if os.name == "Ubuntu":
        result.operating_system = replace(os, name="Ubuntu Mobile")
    elif os.name == "Linux":
        result.set_operating_system("Android")


def _apply_heuristics(result: Resolution, name: str, os_locked: bool) -> None:
    """Last resort checks for tokens missing from the keyword table"""
    lowered = name.lower()
    if lowered.startswith("linux") and not os_locked:
        result.set_operating_system("Linux")
    elif lowered.endswith(ROBOT_SUFFIXES):
        result.device_category = DeviceCategory.ROBOT
    elif lowered.startswith("mid") and not lowered.startswith("midp"):
        result.promote_device(DeviceCategory.TABLET)
    elif lowered.startswith(("coolpad", "lg-", "sonyericsson")):
        result.promote_device(DeviceCategory.MOBILE)


def resolve(tokens: Iterable[Token], table: KeywordTable) -> Resolution:
    """
    Walk the tokens of a User-Agent string, classifying each of them
    through the keyword table.

    Multi-word names ("Windows NT", "Mac OS X", "Opera Mini") are assembled
    by buffering a word until the next token tells whether the merged name
    is known. Browser and operating system found through FORCE_* rules are
    locked, and MAYBE_* rules only apply until a definitive rule matched.
    """
    result = Resolution()
    pending: Optional[PendingMerge] = None
    maybe_browser = True
    maybe_os = True
    browser_locked = False
    os_locked = False

    for token in tokens:
        name, major, minor = token.name, token.major, token.minor

        if pending is not None:
            buffered, target = pending
            pending = None
            merged = f"{buffered} {name}"
            if target is None:
                name = merged
            else:
                classification = table.classify(merged)
                if classification is not None and _accepts(target, classification.kind):
                    name = merged
                else:
                    # the merge failed, keep the buffered word alone
                    _commit(result, buffered, target)

        classification = table.classify(name)
        if classification is None and major is not None:
            alternate = f"{name}{token.separator or ''}{major}"
            classification = table.classify(alternate)
            if classification is not None:
                name, major, minor = alternate, None, None

        if classification is None:
            _apply_heuristics(result, name, os_locked)
            continue

        kind, device = classification
        if device is not None:
            result.promote_device(device)

        if kind is None or kind is EntityKind.IGNORE:
            continue

        if kind is EntityKind.BROWSER:
            if not browser_locked:
                result.set_browser(name, major, minor)
                maybe_browser = False

        elif kind is EntityKind.BROWSER_AND_OS:
            result.set_browser(name, major, minor)
            result.set_operating_system(name, major, minor)
            maybe_browser = maybe_os = False

        elif kind is EntityKind.RENDERING_ENGINE:
            engine = result.rendering_engine
            if name.lower() != "khtml" or major is not None or engine is None or engine.major_version is None:
                result.set_rendering_engine(name, major, minor)

        elif kind is EntityKind.FORCE_BROWSER:
            if not browser_locked:
                result.set_browser(name, major, minor)
                maybe_browser = False
                browser_locked = True

        elif kind is EntityKind.FORCE_OS:
            if not os_locked:
                result.set_operating_system(name, major, minor)
                maybe_os = False
                os_locked = True

        elif kind is EntityKind.MAYBE_BROWSER:
            if maybe_browser:
                alias = _maybe_browser_name(name, result.browser)
                if alias is not None:
                    result.set_browser(alias, major, minor)

        elif kind is EntityKind.MAYBE_OS:
            if maybe_os:
                result.set_operating_system(name, major, minor)

        elif kind is EntityKind.MAYBE_ROBOT:
            result.maybe_robot = True

        elif kind is EntityKind.MERGE:
            if major is None:
                if token.next_char not in TERMINATORS:
                    pending = (name, None)
                elif name.lower() == "mobile":
                    _retag_mobile(result)

        elif kind is EntityKind.MERGE_OR_BROWSER:
            if not browser_locked:
                if major is not None or token.next_char in TERMINATORS:
                    result.set_browser(name, major, minor)
                else:
                    pending = (name, EntityKind.BROWSER)

        elif kind is EntityKind.MERGE_OR_OS:
            if not os_locked:
                if major is not None or token.next_char in TERMINATORS:
                    result.set_operating_system(name, major, minor)
                else:
                    pending = (name, EntityKind.OS)

        elif kind is EntityKind.OS:
            if not os_locked:
                result.set_operating_system(name, major, minor)
                maybe_os = False

        elif kind is EntityKind.ROBOT:
            result.device_category = DeviceCategory.ROBOT

    if pending is not None and pending[1] is not None:
        _commit(result, *pending)

    return result
