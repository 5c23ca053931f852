"""
eqbc-client terminal package.

An interactive EQBC chat client on top of the ``eqbc`` toolkit.  Use
``python -m eqbc_cli`` or ``python/eqbc_client.py`` to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
