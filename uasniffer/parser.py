# uasniffer/parser.py

from typing import Optional
from uasniffer.keywords import KeywordTable, get_keyword_table
from uasniffer.models import UNPARSED, ParsedUserAgent
from uasniffer.normalizer import normalize
from uasniffer.resolver import resolve
from uasniffer.tokenizer import tokenize
import logging

logger = logging.getLogger(__name__)


class UserAgentParser:
    """
    User-Agent parser bound to a keyword table.

    Holds no per-call state: a single instance can be shared between threads.
    """

    def __init__(self, table: Optional[KeywordTable] = None):
        self.table = table if table is not None else get_keyword_table()

    def parse(self, user_agent: Optional[str]) -> ParsedUserAgent:
        """
        Parse a User-Agent header value.

        Never raises: unexpected failures are logged and reported
        through the UNPARSED result.
        """
        if user_agent is None:
            user_agent = ""
        try:
            return normalize(resolve(tokenize(user_agent), self.table))
        except Exception:
            logger.error(f"Could not parse User-Agent: {user_agent!r}", exc_info=True)
            return UNPARSED


def parse(user_agent: Optional[str]) -> ParsedUserAgent:
    """Parse a User-Agent header value with the process-wide keyword table"""
    return UserAgentParser(get_keyword_table()).parse(user_agent)
