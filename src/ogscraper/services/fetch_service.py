"""Page fetching: the request path that precedes Open Graph extraction.

Flow:
- split options into scraper / transport sets
- validate + normalize the URL, apply the blacklist, refuse non-HTML targets
- download through a bounded client
- reject error statuses, non-HTML content types and empty bodies
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import aiohttp
from multidict import CIMultiDictProxy
from pydantic import ValidationError

from ..domain.errors import (
    BlacklistedURLError,
    HTTPStatusError,
    InvalidInputError,
    InvalidURLError,
    NonHTMLURLError,
    PageNotFoundError,
)
from ..http.client import create_bounded_client
from ..models.options import ScraperOptions
from ..observability.logger import get_logger
from ..utils.options import option_setup_and_split
from ..utils.urls import is_this_a_non_html_url, validate_and_format_url

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    requested_url: str
    url: str
    status: int
    headers: CIMultiDictProxy[str]
    html: str
    charset: Optional[str] = None


class PageFetcher:
    def __init__(self, *, session: Optional[aiohttp.ClientSession] = None):
        self._session = session

    async def fetch(self, url: str, options: Optional[Mapping[str, Any]] = None) -> FetchedPage:
        scraper_raw, transport = option_setup_and_split(options)
        try:
            opts = ScraperOptions.model_validate(scraper_raw)
        except ValidationError as e:
            raise InvalidInputError("invalid scraper options", detail=str(e)) from e

        formatted = validate_and_format_url(url, opts.url_validator_settings)["url"]
        if formatted is None:
            logger.info("page_rejected", url=url, reason="invalid_url")
            raise InvalidURLError("Invalid URL", detail=str(url))

        if opts.blacklist and any(entry in formatted for entry in opts.blacklist):
            logger.info("page_rejected", url=formatted, reason="blacklisted")
            raise BlacklistedURLError("Host name has been black listed", detail=formatted)

        if is_this_a_non_html_url(formatted):
            logger.info("page_rejected", url=formatted, reason="non_html_url")
            raise NonHTMLURLError("Must scrape an HTML page", detail=formatted)

        start = time.monotonic()
        async with create_bounded_client(opts.download_limit, transport, session=self._session) as client:
            response = await client.get(formatted)

        if response.status >= 400:
            logger.info("page_rejected", url=response.url, reason="http_status", status=response.status)
            raise HTTPStatusError(response.status, detail=response.url)

        content_type = response.headers.get("Content-Type")
        if content_type is not None and "html" not in content_type.lower():
            logger.info("page_rejected", url=response.url, reason="non_html_content_type", content_type=content_type)
            raise NonHTMLURLError(
                "Page must return a header content-type with text/html",
                detail=content_type,
            )

        if not response.body:
            logger.info("page_rejected", url=response.url, reason="empty_body")
            raise PageNotFoundError("Page not found", detail=response.url)

        logger.info(
            "page_fetched",
            url=response.url,
            status=response.status,
            bytes=len(response.body),
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
        return FetchedPage(
            requested_url=formatted,
            url=response.url,
            status=response.status,
            headers=response.headers,
            html=response.text(),
            charset=response.charset,
        )
