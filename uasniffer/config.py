# uasniffer/config.py

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Keyword table (packaged resource when unset)
    keywords_path: Optional[str] = None

    # Memoized classifications kept by the browser facade (longer strings are never kept)
    classification_cache_size: int = 10000
    classification_max_length: int = 512

    # Accept-Language negotiation, comma separated list of accepted tags
    languages_filter: Optional[str] = None
    default_language: str = "en"

    # Logging
    log_level: str = "INFO"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000

    @property
    def languages(self) -> Optional[List[str]]:
        if not self.languages_filter:
            return None
        return [tag.strip().lower().replace("-", "_") for tag in self.languages_filter.split(",") if tag.strip()]

    class Config:
        env_file = ".env"
        env_prefix = "UASNIFFER_"


settings = Settings()
