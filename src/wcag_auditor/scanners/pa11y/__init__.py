"""Integration with the pa11y accessibility test runner."""

from .runner import Pa11yAuditor, build_command, parse_output

__all__ = ["Pa11yAuditor", "build_command", "parse_output"]
