#!/usr/bin/env python3
"""Run formatters, linters and the test suite in one go.

Order: black, isort, ruff, pylint, pytest. `--fix` lets black/isort/ruff
rewrite files instead of only checking them. Output of failing steps is
repeated at the end.
"""

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
PACKAGES = ["app", "core", "infrastructure", "main.py"]


def build_commands(fix: bool) -> list[tuple[list[str], str]]:
    """Return (command, description) pairs for every check."""
    py = sys.executable
    return [
        ([py, "-m", "black", "."] + ([] if fix else ["--check"]), "black"),
        ([py, "-m", "isort", "."] + ([] if fix else ["--check-only"]), "isort"),
        ([py, "-m", "ruff", "check", "."] + (["--fix"] if fix else []), "ruff"),
        ([py, "-m", "pylint", *PACKAGES], "pylint"),
        ([py, "-m", "pytest", "-q"], "pytest"),
    ]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the repo root; return (success, combined output)."""
    print(f"\n{'=' * 60}\n{description}: {' '.join(cmd[2:])}\n{'=' * 60}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    output = result.stdout + result.stderr
    success = result.returncode == 0
    print("ok" if success else "FAILED")
    if output.strip():
        print(output)
    return success, output


def main() -> None:
    fix = "--fix" in sys.argv[1:]
    results = [(desc, *run_command(cmd, desc)) for cmd, desc in build_commands(fix)]

    print(f"\n{'=' * 60}\nSummary\n{'=' * 60}")
    for description, success, _ in results:
        print(f"{description:>8}: {'ok' if success else 'FAILED'}")

    failed = [(d, out) for d, ok, out in results if not ok]
    for description, output in failed:
        if output.strip():
            print(f"\n--- {description} ---\n{output}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
