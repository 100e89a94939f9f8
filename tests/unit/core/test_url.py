from __future__ import annotations

import httpx
import pytest

from restcall.core.url import build_request_url, merge_query_params
from restcall.exceptions import UrlParseError

#######################################
#     Tests for build_request_url     #
#######################################


@pytest.mark.parametrize(
    ("base_url", "url", "expected"),
    [
        ("https://api.example.com", "/users", "https://api.example.com/users"),
        ("https://api.example.com/", "/users", "https://api.example.com/users"),
        ("https://api.example.com//", "/users", "https://api.example.com/users"),
        ("https://api.example.com/v1", "/users/1", "https://api.example.com/v1/users/1"),
    ],
)
def test_build_request_url_relative_path(base_url: str, url: str, expected: str) -> None:
    """Test that exactly one slash joins the base URL and the path."""
    assert build_request_url(base_url, url) == expected


def test_build_request_url_absolute_url_ignores_base_url() -> None:
    assert (
        build_request_url("https://api.example.com", "https://other.example.com/x")
        == "https://other.example.com/x"
    )


def test_build_request_url_without_base_url() -> None:
    assert build_request_url("", "/users") == "/users"


def test_build_request_url_path_without_leading_slash_is_verbatim() -> None:
    assert build_request_url("https://api.example.com", "users") == "users"


def test_build_request_url_without_query_params_is_verbatim() -> None:
    url = "https://api.example.com/search?q=a%20b&z=1&a=2"
    assert build_request_url("", url) == url
    assert build_request_url("", url, {}) == url


def test_build_request_url_adds_query_params() -> None:
    assert (
        build_request_url("https://api.example.com", "/users", {"page": "2", "limit": "10"})
        == "https://api.example.com/users?limit=10&page=2"
    )


def test_build_request_url_query_params_overwrite_existing() -> None:
    """Test that a query parameter replaces the value already in the
    URL."""
    assert (
        build_request_url("", "https://api.example.com/users?page=1&sort=asc", {"page": "2"})
        == "https://api.example.com/users?page=2&sort=asc"
    )


def test_build_request_url_query_params_overwrite_repeated_values() -> None:
    assert (
        build_request_url("", "https://api.example.com/users?tag=a&tag=b", {"tag": "c"})
        == "https://api.example.com/users?tag=c"
    )


def test_build_request_url_invalid_url() -> None:
    with pytest.raises(UrlParseError, match=r"parsing URL") as exc_info:
        build_request_url("", "https://api.example.com/\x00", method="GET")

    assert exc_info.value.method == "GET"
    assert exc_info.value.url == "https://api.example.com/\x00"
    assert isinstance(exc_info.value.cause, httpx.InvalidURL)


def test_build_request_url_invalid_base_url() -> None:
    with pytest.raises(UrlParseError):
        build_request_url("https://api.example.com:abc", "/users")


########################################
#     Tests for merge_query_params     #
########################################


def test_merge_query_params_sorted_by_name() -> None:
    assert merge_query_params(httpx.QueryParams("z=1&a=2"), {"m": "3"}) == [
        ("a", "2"),
        ("m", "3"),
        ("z", "1"),
    ]


def test_merge_query_params_keeps_repeated_values_order() -> None:
    assert merge_query_params(httpx.QueryParams("a=2&a=1"), {}) == [("a", "2"), ("a", "1")]


def test_merge_query_params_empty() -> None:
    assert merge_query_params(httpx.QueryParams(), {}) == []
