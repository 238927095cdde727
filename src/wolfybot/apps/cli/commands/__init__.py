"""Typer command groups for the ``wolfybot`` CLI."""

from __future__ import annotations

import functools
import os
import traceback


def run_safe(func):
    """Wrap Typer callbacks to surface tracebacks when WOLFYBOT_CLI_DEBUG=1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            if os.getenv("WOLFYBOT_CLI_DEBUG") == "1":
                traceback.print_exc()
            raise

    return wrapper
