#!/usr/bin/env python3
"""Wrapper to run sbench from a source checkout without installing it.

The actual implementation is in the sbench package.
"""
from sbench.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
