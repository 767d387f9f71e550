"""Dependency checks for external tooling required by the audit engines."""

from __future__ import annotations

import shutil
import subprocess
from typing import Dict, Iterable

ENGINE_TOOLS: Dict[str, Iterable[tuple[str, list[str]]]] = {
    "pa11y": (("pa11y", ["pa11y", "--version"]),),
    "axe": (),
}


def check_tool(command: list[str]) -> bool:
    """Returns ``True`` if the command completes successfully."""

    executable = command[0]
    if shutil.which(executable) is None:
        return False

    try:
        subprocess.run(command, capture_output=True, text=True, check=True)
        return True
    except subprocess.CalledProcessError:
        return False


def verify_dependencies(engine: str = "pa11y") -> dict[str, bool]:
    """Checks each tool the engine needs and returns a mapping with the result."""

    results: dict[str, bool] = {}
    for name, command in ENGINE_TOOLS.get(engine, ()):
        results[name] = check_tool(command)
    return results
