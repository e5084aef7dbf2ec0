# uasniffer/routes.py

from fastapi import APIRouter, Request
from uasniffer.classifier import BrowserInfo, classify_user_agent_cached
from uasniffer.keywords import get_keyword_table
from uasniffer.schemas import BrowserReport, KeywordStats, ParseRequest, ParseResponse, UserAgentSchema
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# BrowserInfo tests reported by /api/browser
REPORTED_TESTS = (
    "is_robot", "is_mobile", "is_tablet", "is_desktop", "is_tv",
    "is_gecko", "is_webkit", "is_khtml", "is_trident", "is_blink", "is_edge_html", "is_presto",
    "is_chrome", "is_msie", "is_firefox", "is_opera", "is_safari",
    "is_netscape", "is_konqueror", "is_links", "is_mozilla",
    "is_windows", "is_osx", "is_linux", "is_bsd", "is_unix",
    "is_android", "is_ios", "is_symbian", "is_blackberry",
    "css3", "dom3",
)


@router.post("/api/parse", response_model=ParseResponse)
async def parse_user_agents(request: Request) -> ParseResponse:
    """
    Classify User-Agent strings.
    Accepts a single item or an array of items, each item being either
    an object with a `user_agent` field or a plain string.
    """
    try:
        body = await request.json()
    except ValueError as e:
        logger.warning(f"Invalid request body: {e}")
        return ParseResponse(status="error", processed=0, errors=1)

    # Normalize to list
    if isinstance(body, (dict, str)):
        items = [body]
    elif isinstance(body, list):
        items = body
    else:
        return ParseResponse(status="error", processed=0, errors=1)

    processed = 0
    errors = 0
    results = []

    for item in items:
        try:
            if isinstance(item, str):
                item = {"user_agent": item}
            parse_request = ParseRequest(**item)
            parsed = classify_user_agent_cached(parse_request.user_agent)
            results.append(UserAgentSchema.from_parsed(parsed))
            processed += 1

        except Exception as e:
            errors += 1
            logger.warning(f"Failed to process item: {e}")

    return ParseResponse(
        status="ok" if errors == 0 else "partial",
        processed=processed,
        errors=errors,
        results=results,
    )


@router.get("/api/browser", response_model=BrowserReport)
async def sniff_browser(request: Request) -> BrowserReport:
    """Classify the calling client from its own request headers"""
    remote_addr = request.client.host if request.client else None
    info = BrowserInfo.from_headers(request.headers, remote_addr)
    return BrowserReport.from_parsed(
        info.user_agent,
        user_agent=info.user_agent_string,
        preferred_language=info.preferred_language,
        ip_address=info.ip_address,
        tests={test: getattr(info, test) for test in REPORTED_TESTS},
    )


@router.get("/health")
async def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy"}


@router.get("/stats/keywords", response_model=KeywordStats)
async def keyword_stats() -> KeywordStats:
    """Quick endpoint to check the loaded keyword table"""
    table = get_keyword_table()
    return KeywordStats(
        source=table.source,
        keywords=len(table),
        by_kind=count_by_kind(table),
    )


def count_by_kind(table) -> dict:
    """Helper to count keywords by entity kind"""
    counts = {}
    for classification in table.values():
        key = classification.kind.name if classification.kind is not None else "NONE"
        counts[key] = counts.get(key, 0) + 1
    return counts
