#!/usr/bin/env python3
"""Repo-standard test runner.

Extra arguments are passed through to pytest. Set WONDERLAND_SKIP_INSTALL=on
to reuse an existing editable install.
"""

from __future__ import annotations

import os
import subprocess
import sys


def run(command: list[str]) -> None:
    print(f"+ {' '.join(command)}", flush=True)
    subprocess.run(command, check=True)


def main(argv: list[str]) -> int:
    print(f"Python interpreter: {sys.executable}", flush=True)
    skip_install = os.getenv("WONDERLAND_SKIP_INSTALL", "off").strip().casefold() == "on"
    try:
        if not skip_install:
            run([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])
        run([sys.executable, "-m", "pytest", "-q", *argv])
    except subprocess.CalledProcessError as exc:
        return exc.returncode or 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
