import pytest

import wcag_auditor.core.config as config_module  # type: ignore[import]

from tests.helpers.auditor_imports import ConfigurationError, load_configuration

ENV_KEYS = [
    "MAX_CRAWL_DEPTH",
    "MAX_PAGES",
    "AUDIT_STANDARD",
    "AUDIT_WAIT_MS",
    "AUDIT_TIMEOUT_MS",
    "INCLUDE_WARNINGS",
    "INCLUDE_NOTICES",
    "PA11Y_RUNNERS",
    "AUDIT_ENGINE",
    "FETCH_TIMEOUT",
    "FETCH_WORKERS",
    "CRAWLER_USER_AGENT",
    "HEADLESS",
    "AXE_SCRIPT_URL",
    "REPORT_PATH",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_configuration_defaults(tmp_path):
    output = tmp_path / "results.xlsx"

    config = load_configuration("https://example.com", str(output))

    assert config.seed_url == "https://example.com"
    assert config.report_path == output.resolve()
    assert config.max_depth == 2
    assert config.max_pages == 100
    assert config.engine == "pa11y"
    assert config.fetch_workers == 1
    assert config.crawl_report_path is None
    assert config.audit_options.standard == "WCAG2AA"
    assert config.audit_options.wait_ms == 5000
    assert config.audit_options.include_warnings is True
    assert config.audit_options.include_notices is True
    assert config.audit_options.runners == ("htmlcs",)


def test_load_configuration_uses_environment(monkeypatch):
    monkeypatch.setenv("MAX_CRAWL_DEPTH", "0")
    monkeypatch.setenv("MAX_PAGES", "5")
    monkeypatch.setenv("AUDIT_STANDARD", "wcag2aaa")
    monkeypatch.setenv("INCLUDE_NOTICES", "no")
    monkeypatch.setenv("PA11Y_RUNNERS", "htmlcs, axe")
    monkeypatch.setenv("AUDIT_ENGINE", "AXE")
    monkeypatch.setenv("HEADLESS", "false")

    config = load_configuration("https://example.com/docs/")

    assert config.max_depth == 0
    assert config.max_pages == 5
    assert config.audit_options.standard == "WCAG2AAA"
    assert config.audit_options.include_notices is False
    assert config.audit_options.runners == ("htmlcs", "axe")
    assert config.engine == "axe"
    assert config.headless is False
    assert config.seed_url == "https://example.com/docs/"


def test_explicit_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("MAX_PAGES", "5")
    monkeypatch.setenv("INCLUDE_WARNINGS", "true")

    config = load_configuration("https://example.com", max_pages=7, include_warnings=False)

    assert config.max_pages == 7
    assert config.audit_options.include_warnings is False


@pytest.mark.parametrize(
    "seed",
    ["", "not a url", "example.com", "ftp://example.com", "https://", "http://example.com:99999"],
)
def test_invalid_seed_fails_fast(seed):
    with pytest.raises(ConfigurationError):
        load_configuration(seed)


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": -1},
        {"max_pages": 0},
        {"standard": "WCAG3"},
        {"wait_ms": -5},
        {"engine": "lighthouse"},
        {"fetch_timeout": 0},
        {"fetch_workers": 0},
    ],
)
def test_invalid_values_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        load_configuration("https://example.com", **overrides)


def test_non_numeric_environment_value_is_rejected(monkeypatch):
    monkeypatch.setenv("MAX_PAGES", "many")

    with pytest.raises(ConfigurationError):
        load_configuration("https://example.com")


def test_unsupported_output_suffix_is_rejected(tmp_path):
    with pytest.raises(ConfigurationError):
        load_configuration("https://example.com", str(tmp_path / "results.json"))


def test_configuration_is_read_only():
    config = load_configuration("https://example.com")

    with pytest.raises(AttributeError):
        config.max_pages = 3  # type: ignore[misc]
