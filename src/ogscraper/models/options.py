"""Option models: scraper behaviour vs. HTTP transport.

``ScraperOptions`` is the single definition of the scraper-only keys; the set
of keys stripped from transport options is derived from it.
"""

from __future__ import annotations

from re import Pattern
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


HostMatcher = Union[str, Pattern[str]]


class ValidatorSettings(BaseModel):
    """Rules applied by ``ogscraper.utils.validators.is_url``."""

    protocols: List[str] = Field(default_factory=lambda: ["http", "https"])
    require_tld: bool = True
    require_protocol: bool = False
    require_host: bool = True
    require_port: bool = False
    require_valid_protocol: bool = True
    allow_underscores: bool = False
    allow_trailing_dot: bool = False
    allow_protocol_relative_urls: bool = False
    allow_fragments: bool = True
    allow_query_components: bool = True
    validate_length: bool = True
    max_allowed_length: int = 2084
    disallow_auth: bool = False
    host_whitelist: Optional[List[HostMatcher]] = None
    host_blacklist: Optional[List[HostMatcher]] = None

    @field_validator("protocols")
    @classmethod
    def lowercase_protocols(cls, v: List[str]) -> List[str]:
        return [p.lower() for p in v]


class CustomMetaTag(BaseModel):
    multiple: bool = False
    property: str
    field_name: str


class ScraperOptions(BaseModel):
    all_media: bool = False
    blacklist: Optional[List[str]] = None
    custom_meta_tags: List[CustomMetaTag] = Field(default_factory=list)
    # False disables the limit
    download_limit: Union[Literal[False], int] = 1_000_000
    og_image_fallback: bool = True
    only_get_open_graph_info: bool = False
    peek_size: int = 1024
    url_validator_settings: ValidatorSettings = Field(default_factory=ValidatorSettings)


class TransportOptions(BaseModel):
    """Options for the HTTP layer; unknown keys are forwarded to aiohttp."""

    model_config = ConfigDict(extra="allow")

    decompress: bool = True
    follow_redirect: bool = True
    headers: Dict[str, Any] = Field(default_factory=dict)
    max_redirects: int = 10


SCRAPER_OPTION_KEYS: frozenset[str] = frozenset(ScraperOptions.model_fields)


def scraper_defaults() -> dict[str, Any]:
    return ScraperOptions().model_dump(exclude_none=True)


def transport_defaults() -> dict[str, Any]:
    return TransportOptions().model_dump()
