"""Integration with axe-core through Playwright."""

from .runner import AxeAuditor, build_run_options, issues_from_axe_results

__all__ = ["AxeAuditor", "build_run_options", "issues_from_axe_results"]
