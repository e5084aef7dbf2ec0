# uasniffer/tokenizer.py

import re
from typing import Iterator, NamedTuple, Optional

TOKEN_PATTERN = re.compile(
    # entity name, never starting in the middle of a word
    r"(?<![a-z])"
    r"([a-z]+(?:(?=[;()@]|$)|(?:[0-9]+(?!\.)[a-z]*)|(?:[!_+.\-][a-z]+)+|(?=[/ ,\-:0-9+!_=])))"
    # potential version
    r"(?:([/ ,\-:+_=])?(?:v?(\d+)(?:\.(\d+))?[a-z+]*)?)",
    re.IGNORECASE | re.ASCII,
)

# Lookahead reported for a name ending the string
END_OF_INPUT = ";"


class Token(NamedTuple):
    name: str
    separator: Optional[str]
    major: Optional[str]
    minor: Optional[str]
    next_char: str


class TokenStream:
    """
    Lazy sequence of tokens found in a User-Agent string.
    Each iteration scans the string again from its start.
    """

    def __init__(self, user_agent: str):
        self.user_agent = user_agent

    def __iter__(self) -> Iterator[Token]:
        user_agent = self.user_agent
        length = len(user_agent)
        for match in TOKEN_PATTERN.finditer(user_agent):
            end = match.end(1)
            next_char = user_agent[end] if end < length else END_OF_INPUT
            yield Token(match.group(1), match.group(2), match.group(3), match.group(4), next_char)

    def __repr__(self) -> str:
        return f"TokenStream({self.user_agent!r})"


def tokenize(user_agent: str) -> TokenStream:
    return TokenStream(user_agent)
