"""Unit tests for document identity derivation."""

import re

import pytest

from readpub.core.ingestion.identity import derive_identity, sanitize_segment
from readpub.utils.exceptions import InvalidUrlError

UNSAFE = re.compile(r'[/\\:?*"<>|\s\x00-\x1f\x7f]')


def test_final_path_segment_is_identity():
    """Test the last path component becomes the identity."""
    assert derive_identity("https://example.com/articles/foo-bar") == "foo-bar"


def test_query_and_fragment_are_ignored():
    """Test query strings and fragments do not leak into the identity."""
    assert derive_identity("https://example.com/articles/foo-bar?ref=rss#top") == "foo-bar"


def test_trailing_slash_uses_last_non_empty_segment():
    """Test a directory style URL keeps its last named segment."""
    assert derive_identity("https://example.com/blog/2024/my-post/") == "my-post"


def test_encoded_whitespace_becomes_underscore():
    """Test percent-encoded spaces are decoded and replaced."""
    assert derive_identity("https://example.com/notes/my%20first%20note") == "my_first_note"


def test_encoded_separators_and_markers_are_sanitized():
    """Test encoded slashes, colons and question marks are neutralized."""
    identity = derive_identity("https://example.com/a/why%3Fnot%3A%2Fthis%5Cthat")
    assert identity == "whynot_this_that"


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/articles/foo-bar",
        "https://example.com/wiki/Talk:Main%20Page",
        "https://example.com/q/what%3F%20why%3F",
        "http://example.com:8080/p/a%09b%0Ac",
        "https://example.com/files/report%20%2F%202024.html",
        'https://example.com/x/%22quoted%22%3Cangle%3E%7Cpipe%2A',
        "https://example.com/x/a%00b",
        "https://example.com/x/bell%07here%7F",
    ],
)
def test_identity_is_single_safe_segment(url):
    """Test identities never contain separators, colons, question marks or whitespace."""
    identity = derive_identity(url)
    assert identity
    assert not UNSAFE.search(identity)


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "https://example.com/",
        "https://example.com/..",
        "https://example.com/%3F%3A",
    ],
)
def test_fallback_for_urls_without_usable_segment(url):
    """Test URLs without a usable final segment fall back to host plus hash."""
    identity = derive_identity(url)
    assert re.fullmatch(r"example\.com-[0-9a-f]{12}", identity)


def test_fallback_is_deterministic_and_url_specific():
    """Test the fallback identity is stable per URL and differs between URLs."""
    first = derive_identity("https://example.com/")
    assert derive_identity("https://example.com/") == first
    assert derive_identity("https://example.org/") != first


def test_fallback_strips_port_colon():
    """Test the host part of a fallback identity has no colon."""
    identity = derive_identity("https://example.com:8443/")
    assert ":" not in identity
    assert identity.startswith("example.com-")


@pytest.mark.parametrize(
    "url",
    ["", "not a url", "/articles/foo-bar", "example.com/articles/foo", "http://[::1/foo"],
)
def test_invalid_urls_raise(url):
    """Test unparseable or relative URLs raise InvalidUrlError."""
    with pytest.raises(InvalidUrlError):
        derive_identity(url)


def test_sanitize_segment():
    """Test the character rules applied to a candidate segment."""
    assert sanitize_segment("a b\tc") == "a_b_c"
    assert sanitize_segment("a/b\\c") == "a_b_c"
    assert sanitize_segment("what?:now") == "whatnow"
    assert sanitize_segment('x*"<>|y') == "xy"


def test_control_characters_are_removed():
    """Test decoded control characters never reach the identity."""
    assert derive_identity("https://example.com/x/a%00b") == "ab"
    assert derive_identity("https://example.com/x/bell%07here%7F") == "bellhere"
    assert sanitize_segment("a\x00b\x1bc\x7f") == "abc"


def test_control_character_identity_creates_workspace(workspace):
    """Test an identity from a URL with a NUL byte is usable as a directory."""
    document = workspace.ensure(derive_identity("https://example.com/x/a%00b"))
    assert document.path.is_dir()
