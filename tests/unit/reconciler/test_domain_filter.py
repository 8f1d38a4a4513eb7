"""Unit tests for reconciler.domain_filter module."""

import pytest

from wp_architect.reconciler.domain_filter import is_same_domain, normalize_host

BASE = "https://www.fme.de"


class TestIsSameDomain:
    """Test cases for is_same_domain()."""

    @pytest.mark.parametrize("item_url", [
        "https://www.fme.de/about/",
        "https://fme.de/about/",
        "http://FME.de/",
    ])
    def test_same_site(self, item_url):
        assert is_same_domain(item_url, BASE) is True

    @pytest.mark.parametrize("item_url", [
        "https://en.fme.de/about/",
        "https://www.fme.com/about/",
        "https://shop.fme.de/",
    ])
    def test_other_hosts_excluded(self, item_url):
        assert is_same_domain(item_url, BASE) is False

    def test_empty_urls_kept(self):
        assert is_same_domain("", BASE) is True
        assert is_same_domain("https://en.fme.de/", "") is True

    def test_unparsable_kept(self):
        assert is_same_domain("not a url", BASE) is True


class TestNormalizeHost:
    """Test cases for normalize_host()."""

    def test_strips_only_leading_www(self):
        assert normalize_host("https://www.fme.de/x") == "fme.de"
        assert normalize_host("https://en.www.fme.de/x") == "en.www.fme.de"

    def test_no_host(self):
        assert normalize_host("/relative/path") is None
