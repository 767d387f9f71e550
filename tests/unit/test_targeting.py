import pytest

from wcag_auditor.recon.targeting import DomainFilter, canonical_key, origin_of  # type: ignore[import]

from tests.helpers.auditor_imports import ConfigurationError


def test_origin_drops_default_port_and_path():
    assert origin_of("https://Example.com:443/about?x=1#top") == "https://example.com"
    assert origin_of("http://example.com:8080/") == "http://example.com:8080"


def test_origin_rejects_non_web_urls():
    assert origin_of("mailto:someone@example.com") is None
    assert origin_of("/relative/path") is None
    assert origin_of("http://example.com:bad/") is None


def test_domain_filter_requires_same_scheme_and_host():
    domain = DomainFilter.from_seed("https://example.com")

    assert domain.base_domain == "https://example.com"
    assert domain.is_allowed("https://example.com/about")
    assert not domain.is_allowed("http://example.com/about")
    assert not domain.is_allowed("https://blog.example.com/")
    assert not domain.is_allowed("https://other.com/")


def test_domain_filter_rejects_unparsable_seed():
    with pytest.raises(ConfigurationError):
        DomainFilter.from_seed("example.com")


def test_canonical_key_treats_root_variants_as_one_page():
    assert canonical_key("https://example.com") == canonical_key("https://EXAMPLE.com:443/")
    assert canonical_key("https://example.com/a?b=1#frag") == "https://example.com/a?b=1"
    assert canonical_key("https://example.com/a") != canonical_key("https://example.com/a/")
