import pandas as pd

import wcag_auditor.cli as cli  # type: ignore[import]
import wcag_auditor.core.config as config_module  # type: ignore[import]

from tests.helpers.auditor_imports import AuditError, AuditIssue, AuditResult, CrawlReport
from tests.helpers.fakes import FakeAuditor, FakeFetcher, links_page

SEED = "https://example.com"


def _patch_pipeline(monkeypatch, pages, auditor):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    monkeypatch.setattr(cli, "verify_dependencies", lambda engine: {"pa11y": True})
    monkeypatch.setattr(cli, "configure_logging", lambda verbose: None)
    monkeypatch.setattr(cli, "build_auditor", lambda config, report=None: auditor)

    real_spider = cli.Spider
    monkeypatch.setattr(cli, "Spider", lambda config: real_spider(config, fetcher=FakeFetcher(pages)))


def test_invalid_seed_exits_with_configuration_error(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    monkeypatch.setattr(cli, "configure_logging", lambda verbose: None)

    def fail_dependencies(engine):
        raise AssertionError("no work should happen after a configuration error")

    monkeypatch.setattr(cli, "verify_dependencies", fail_dependencies)

    assert cli.run_cli(["-u", "not-a-url"]) == cli.EXIT_CONFIGURATION


def test_missing_dependency_stops_before_crawling(monkeypatch, capsys):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    monkeypatch.setattr(cli, "configure_logging", lambda verbose: None)
    monkeypatch.setattr(cli, "verify_dependencies", lambda engine: {"pa11y": False})

    assert cli.run_cli(["-u", SEED]) == cli.EXIT_FAILURE
    assert "pa11y not found" in capsys.readouterr().out


def test_full_pipeline_exports_issues_and_failures(monkeypatch, tmp_path):
    pages = {SEED: links_page("/about", "https://other.com/")}
    issue = AuditIssue(type="error", code="H37", message="Missing alt", runner="htmlcs")
    auditor = FakeAuditor(
        {
            SEED: AuditResult(url=SEED, document_title="Home", issues=(issue, issue)),
            "https://example.com/about": AuditError("Navigation timeout"),
        }
    )
    _patch_pipeline(monkeypatch, pages, auditor)
    output = tmp_path / "out.xlsx"
    crawl_report = tmp_path / "crawl.json"

    exit_code = cli.run_cli(
        ["-u", SEED, "-o", str(output), "-d", "1", "-p", "10", "--crawl-report", str(crawl_report)]
    )

    assert exit_code == cli.EXIT_OK
    assert auditor.calls == [SEED, "https://example.com/about"]
    frame = pd.read_excel(output, dtype=str, keep_default_na=False)
    assert frame["Tested URL"].tolist() == [SEED, SEED, "https://example.com/about"]
    assert frame["Issue Type"].tolist() == ["error", "error", "audit-failure"]
    assert crawl_report.exists()


def test_run_without_issues_skips_export(monkeypatch, tmp_path, capsys):
    _patch_pipeline(monkeypatch, {SEED: links_page()}, FakeAuditor({}))
    output = tmp_path / "out.xlsx"

    assert cli.run_cli(["-u", SEED, "-o", str(output), "-d", "0"]) == cli.EXIT_OK
    assert not output.exists()
    assert "Nothing to export" in capsys.readouterr().out


def test_export_failure_is_reported(monkeypatch, tmp_path, capsys):
    issue = AuditIssue(type="error", code="H37", message="Missing alt", runner="htmlcs")
    _patch_pipeline(
        monkeypatch,
        {SEED: links_page()},
        FakeAuditor({SEED: AuditResult(url=SEED, document_title="Home", issues=(issue,))}),
    )
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    exit_code = cli.run_cli(["-u", SEED, "-o", str(blocker / "out.xlsx"), "-d", "0"])

    assert exit_code == cli.EXIT_FAILURE
    output = capsys.readouterr().out
    assert "error: 1" in output
    assert "Could not write" in output


def test_build_auditor_selects_engine(tmp_path):
    pa11y_config = config_module.AuditorConfig(seed_url=SEED, report_path=tmp_path / "a.xlsx")
    axe_config = config_module.AuditorConfig(seed_url=SEED, report_path=tmp_path / "a.xlsx", engine="axe")

    assert isinstance(cli.build_auditor(pa11y_config), cli.Pa11yAuditor)
    assert isinstance(cli.build_auditor(axe_config), cli.AxeAuditor)


def test_pa11y_auditor_uses_crawled_page_titles(tmp_path):
    config = config_module.AuditorConfig(seed_url=SEED, report_path=tmp_path / "a.xlsx")
    report = CrawlReport(seed_url=SEED, page_titles={SEED: "Home"})

    auditor = cli.build_auditor(config, report)

    assert auditor.title_lookup(SEED) == "Home"
