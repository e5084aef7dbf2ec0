# uasniffer/schemas.py

from pydantic import BaseModel
from typing import Dict, List, Optional
from uasniffer.models import ParsedUserAgent, VersionedEntity


class ParseRequest(BaseModel):
    """User-Agent to classify"""
    user_agent: Optional[str] = ""

    class Config:
        extra = "ignore"  # Ignore unexpected fields


class EntitySchema(BaseModel):
    name: str
    major_version: Optional[int] = None
    minor_version: Optional[int] = None

    @classmethod
    def from_entity(cls, entity: VersionedEntity) -> "EntitySchema":
        return cls(
            name=entity.name,
            major_version=entity.major_version,
            minor_version=entity.minor_version,
        )


class UserAgentSchema(BaseModel):
    """Parsed User-Agent"""
    device: str
    browser: EntitySchema
    rendering_engine: Optional[EntitySchema] = None
    operating_system: EntitySchema

    @classmethod
    def from_parsed(cls, parsed: ParsedUserAgent, **extra) -> "UserAgentSchema":
        engine = parsed.rendering_engine
        return cls(
            device=parsed.device,
            browser=EntitySchema.from_entity(parsed.browser),
            rendering_engine=EntitySchema.from_entity(engine) if engine is not None else None,
            operating_system=EntitySchema.from_entity(parsed.operating_system),
            **extra,
        )


class ParseResponse(BaseModel):
    status: str
    processed: int
    errors: int = 0
    results: List[UserAgentSchema] = []


class BrowserReport(UserAgentSchema):
    """Classification of the calling client"""
    user_agent: Optional[str] = None
    preferred_language: str
    ip_address: Optional[str] = None
    tests: Dict[str, bool] = {}


class KeywordStats(BaseModel):
    source: str
    keywords: int
    by_kind: Dict[str, int]
