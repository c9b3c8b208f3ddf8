"""Run style checks for tenant-cli.

Usage:
    python scripts/lint.py         # style guide lint + black --check
    python scripts/lint.py --fix   # style guide lint + black (rewrites files)
"""

from __future__ import annotations

import subprocess
import sys
from typing import List

TARGETS = ["tenantcli", "tests", "scripts"]


def _run(cmd: List[str]) -> int:
    """Run a subprocess command and return its exit code."""
    return subprocess.run(cmd).returncode  # noqa: S603


def main() -> None:
    """Execute lint steps; format in place when --fix is given."""
    fix = "--fix" in sys.argv[1:]

    failed = _run([sys.executable, "-m", "ni_python_styleguide", "lint", *TARGETS]) != 0

    black_cmd = [sys.executable, "-m", "black"]
    if not fix:
        black_cmd.append("--check")
    failed = (_run(black_cmd + TARGETS) != 0) or failed

    sys.exit(1 if failed else 0)


if __name__ == "__main__":  # pragma: no cover
    main()
