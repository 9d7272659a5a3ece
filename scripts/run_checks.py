#!/usr/bin/env python3
"""Run the imageconv checks: ruff, pyright and pytest.

Exits non-zero on the first failing step.
"""

from __future__ import annotations

import argparse
import subprocess
import sys


def run(cmd: list[str]) -> int:
    print("=>", " ".join(cmd))
    res = subprocess.run(cmd, check=False)
    return res.returncode


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--no-tests", action="store_true", help="Skip running pytest")
    parser.add_argument("--fix", action="store_true", help="Let ruff fix what it can")
    parser.add_argument("--backend", choices=["pillow", "vips"], help="Skip handler tests of the other backend")
    args = parser.parse_args()

    ruff = [sys.executable, "-m", "ruff", "check", "imageconv", "tests", "scripts"]
    if args.fix:
        ruff.append("--fix")
    steps: list[tuple[str, list[str]]] = [
        ("ruff", ruff),
        ("pyright", [sys.executable, "-m", "pyright", "imageconv"]),
    ]
    if not args.no_tests:
        pytest_cmd = [sys.executable, "-m", "pytest", "-q"]
        if args.backend:
            other = "vips" if args.backend == "pillow" else "pillow"
            pytest_cmd += ["-k", f"not {other}"]
        steps.append(("pytest", pytest_cmd))

    for name, cmd in steps:
        rc = run(cmd)
        if rc != 0:
            print(f"{name} failed")
            return rc

    print("All checks passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
