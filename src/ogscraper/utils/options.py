"""Split caller options into scraper options and transport options."""

from __future__ import annotations

from typing import Any, Mapping

from ..models.options import SCRAPER_OPTION_KEYS, scraper_defaults, transport_defaults


def option_setup_and_split(options: Any = None) -> tuple[dict[str, Any], dict[str, Any]]:
    """Merge ``options`` over the defaults and split them in two.

    The merge is shallow: a nested value supplied by the caller (e.g.
    ``url_validator_settings``) replaces the default as a whole. Every key
    lands in exactly one of the two results; scraper-only keys never reach the
    transport options, since aiohttp rejects unknown request arguments.
    ``options`` itself is left untouched. Anything that is not a mapping
    (``None``, strings, numbers) contributes nothing, so the defaults come back.

    Returns:
        (scraper_options, transport_options)
    """
    supplied = dict(options) if isinstance(options, Mapping) else {}
    ours = {k: v for k, v in supplied.items() if k in SCRAPER_OPTION_KEYS}
    theirs = {k: v for k, v in supplied.items() if k not in SCRAPER_OPTION_KEYS}

    return {**scraper_defaults(), **ours}, {**transport_defaults(), **theirs}
