#!/usr/bin/env python3
"""Entry point for the eqbc-client terminal."""

from __future__ import annotations

from eqbc_cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
