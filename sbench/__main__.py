#!/usr/bin/env python3
"""Entry point for running sbench as a module: python -m sbench"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
