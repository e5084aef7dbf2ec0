# uasniffer/keywords.py

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, Optional, Union
from uasniffer.config import settings
from uasniffer.models import Classification, DeviceCategory, EntityKind
import logging

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS_PATH = Path(__file__).resolve().parent / "data" / "ua-keywords.txt"


class KeywordTableError(Exception):
    """Raised when the keyword table resource cannot be loaded"""

    def __init__(self, source: str, line_number: Optional[int], message: str):
        self.source = source
        self.line_number = line_number
        self.message = message
        location = source if line_number is None else f"{source}, line {line_number}"
        super().__init__(f"invalid keyword table {location}: {message}")


class KeywordTable(Mapping):
    """
    Read-only mapping from lower-cased token to its classification.
    Built once, then shared between threads without locking.
    """

    def __init__(self, entries: Mapping, source: str = "<memory>"):
        self._entries: Dict[str, Classification] = dict(entries)
        self.source = source

    def __getitem__(self, token: str) -> Classification:
        return self._entries[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KeywordTable(source={self.source!r}, entries={len(self)})"

    def classify(self, token: str) -> Optional[Classification]:
        """Case-insensitive lookup"""
        return self._entries.get(token.lower())


def _parse_line(line: str, source: str, line_number: int):
    eq = line.find("=")
    if eq == -1:
        raise KeywordTableError(source, line_number, "missing '='")

    token = line[:eq].strip().lower()
    if not token:
        raise KeywordTableError(source, line_number, "empty token")

    value = line[eq + 1:].split("#", 1)[0].strip().upper()
    kind_name, _, device_name = value.partition(",")
    kind_name = kind_name.strip()
    device_name = device_name.strip()

    try:
        kind = EntityKind[kind_name] if kind_name else None
    except KeyError:
        raise KeywordTableError(source, line_number, f"unknown entity kind '{kind_name}'") from None
    try:
        device = DeviceCategory[device_name] if device_name else None
    except KeyError:
        raise KeywordTableError(source, line_number, f"unknown device category '{device_name}'") from None

    return token, Classification(kind, device)


def loads(text: str, source: str = "<string>") -> KeywordTable:
    """Parse keyword table rules, one `token=KIND[,DEVICE]` per line"""
    entries: Dict[str, Classification] = {}
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        token, classification = _parse_line(line, source, line_number)
        if token in entries:
            logger.warning(f"Keyword '{token}' redefined at {source}, line {line_number}")
        entries[token] = classification
    return KeywordTable(entries, source)


def dumps(table: Mapping) -> str:
    """Serialize a keyword table back to its line format"""
    lines = []
    for token in sorted(table):
        kind, device = table[token]
        value = kind.name if kind is not None else ""
        if device is not None:
            value += f",{device.name}"
        lines.append(f"{token}={value}")
    return "\n".join(lines) + "\n"


def load_keyword_table(path: Optional[Union[str, Path]] = None) -> KeywordTable:
    """Load the packaged keyword table, or the one found at `path`"""
    path = Path(path) if path is not None else DEFAULT_KEYWORDS_PATH
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise KeywordTableError(str(path), None, f"could not read resource ({e})") from e
    except UnicodeDecodeError as e:
        raise KeywordTableError(str(path), None, f"resource is not valid UTF-8 ({e})") from e

    table = loads(text, str(path))
    logger.debug(f"Loaded {len(table)} keywords from {path}")
    return table


@lru_cache(maxsize=None)
def get_keyword_table() -> KeywordTable:
    """Process-wide keyword table, loaded on first use"""
    return load_keyword_table(settings.keywords_path)
