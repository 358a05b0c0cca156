from __future__ import annotations

from ogscraper.models.options import ValidatorSettings
from ogscraper.utils.urls import (
    coerce_url,
    find_image_type_from_url,
    is_image_type_valid,
    is_this_a_non_html_url,
    is_url_valid,
    validate_and_format_url,
)


def test_is_url_valid_rejects_non_strings_and_empty() -> None:
    for value in (None, 0, 1.5, [], {}, b"http://example.com", ""):
        assert is_url_valid(value, ValidatorSettings()) is False


def test_is_url_valid_never_raises_on_bad_settings() -> None:
    assert is_url_valid("http://example.com", {"protocols": 42}) is False


def test_coerce_url_adds_http_and_is_idempotent() -> None:
    assert coerce_url("example.com") == "http://example.com"
    for url in ("http://a.com", "https://a.com", "ftp://a.com", "ftps://a.com", "HTTPS://a.com"):
        assert coerce_url(url) == url
    assert coerce_url(coerce_url("example.com")) == "http://example.com"


def test_validate_and_format_url() -> None:
    settings = ValidatorSettings()
    assert validate_and_format_url("http://example.com", settings) == {"url": "http://example.com"}
    assert validate_and_format_url("example.com", settings) == {"url": "http://example.com"}
    assert validate_and_format_url("not a url", settings) == {"url": None}
    assert validate_and_format_url(None, settings) == {"url": None}


def test_find_image_type_from_url() -> None:
    assert find_image_type_from_url("https://a.com/img.png?x=1") == "png"
    assert find_image_type_from_url("https://a.com/img.PNG") == "PNG"
    assert find_image_type_from_url("no-dots-here") == "no-dots-here"
    assert find_image_type_from_url("https://a.com/") == "com/"


def test_is_image_type_valid_is_exact_and_case_sensitive() -> None:
    assert is_image_type_valid("png")
    assert is_image_type_valid("jfif")
    assert not is_image_type_valid("PNG")
    assert not is_image_type_valid(" png")
    assert not is_image_type_valid("pdf")


def test_is_this_a_non_html_url() -> None:
    assert is_this_a_non_html_url("https://a.com/report.pdf")
    assert is_this_a_non_html_url("https://a.com/archive.tgz?dl=1")
    assert not is_this_a_non_html_url("https://a.com/index.html")
    assert not is_this_a_non_html_url("https://a.com/")


def test_is_this_a_non_html_url_uses_substring_matching() -> None:
    # ".docs" contains ".doc"
    assert is_this_a_non_html_url("https://a.com/readme.docs")
    assert not is_this_a_non_html_url("https://a.com/page.PDF")
