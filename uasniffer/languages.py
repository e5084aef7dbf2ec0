# uasniffer/languages.py

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

QUALITY_PATTERN = re.compile(r"^q\s*=\s*((?:0|1)(?:\.\d{0,3})?)$")


@dataclass
class LanguageRanges:
    """Accept-Language ranges grouped by quality"""
    by_quality: Dict[float, List[str]] = field(default_factory=dict)

    def ordered(self) -> List[str]:
        """Language tags, best quality first, in header order within a quality"""
        tags = []
        for quality in sorted(self.by_quality, reverse=True):
            tags.extend(self.by_quality[quality])
        return tags


def parse_accept_language(header: Optional[str]) -> LanguageRanges:
    ranges = LanguageRanges()
    if not header:
        return ranges

    for item in header.lower().split(","):
        item = item.strip()
        if not item:
            continue
        tag, _, parameter = item.partition(";")
        tag = tag.strip().replace("-", "_")

        if tag == "*":
            continue

        if not parameter:
            quality = 1.0
        else:
            match = QUALITY_PATTERN.match(parameter.strip())
            if not match:
                logger.warning(f"Could not parse language quality value: {item}")
                continue
            quality = float(match.group(1))

        if quality > 0:
            ranges.by_quality.setdefault(quality, []).append(tag)

    return ranges


def filter_language_tag(tag: str, languages_filter: Optional[List[str]]) -> Optional[str]:
    """Return the tag, or its primary subtag, when accepted by the filter"""
    tag = tag.replace("-", "_")
    if not languages_filter:
        return tag
    if tag in languages_filter:
        return tag
    if "_" in tag:
        primary = tag.split("_", 1)[0]
        if primary in languages_filter:
            return primary
    return None


def preferred_language(
    header: Optional[str],
    languages_filter: Optional[List[str]] = None,
    default: str = "en",
) -> str:
    """
    Negotiate the preferred language of a client.

    The result always belongs to `languages_filter` when one is given.
    """
    ranges = parse_accept_language(header)
    for tag in ranges.ordered():
        accepted = filter_language_tag(tag, languages_filter)
        if accepted is not None:
            return accepted

    if languages_filter:
        return languages_filter[0]
    return default.replace("-", "_")


def client_ip(forwarded_for: Optional[str], remote_addr: Optional[str]) -> Optional[str]:
    """Real client address, keeping the leftmost proxied address"""
    address = forwarded_for or remote_addr
    if address is None:
        return None
    return address.split(",", 1)[0].strip() or None
