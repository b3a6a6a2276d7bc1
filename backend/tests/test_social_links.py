"""
Tests for LinkedIn / GitHub handle normalization.
"""
import pytest

from portfolioforge.services.social_links import extract_username, normalize_profile_url


def test_bare_handles_become_urls():
    assert normalize_profile_url("github", "octocat") == "https://github.com/octocat"
    assert normalize_profile_url("linkedin", "johndoe") == "https://linkedin.com/in/johndoe"


@pytest.mark.parametrize("url", [
    "https://github.com/octocat",
    "http://linkedin.com/in/johndoe",
    "https://www.linkedin.com/in/jane-doe-123/",
])
def test_urls_are_left_unchanged(url):
    platform = "github" if "github" in url else "linkedin"
    assert normalize_profile_url(platform, url) == url


@pytest.mark.parametrize("platform,value", [("github", "octocat"), ("linkedin", "johndoe")])
def test_normalization_is_idempotent(platform, value):
    once = normalize_profile_url(platform, value)
    assert normalize_profile_url(platform, once) == once


def test_empty_input_gives_empty_output():
    assert normalize_profile_url("github", "") == ""
    assert normalize_profile_url("linkedin", None) == ""


def test_unknown_platform_passes_through():
    assert normalize_profile_url("mastodon", "@ada") == "@ada"


@pytest.mark.parametrize("platform,value,expected", [
    ("linkedin", "https://linkedin.com/in/johndoe", "johndoe"),
    ("linkedin", "www.linkedin.com/in/johndoe/?trk=x", "johndoe"),
    ("linkedin", "uk.linkedin.com/in/jane", "jane"),
    ("github", "github.com/octocat", "octocat"),
    ("github", "https://github.com/octocat/hello-world", "octocat"),
    ("github", "octocat", "octocat"),
    ("github", None, None),
])
def test_extract_username(platform, value, expected):
    assert extract_username(platform, value) == expected
