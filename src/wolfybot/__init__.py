"""
WolfyBot: a Slack bot that answers questions.

Inbound messages are classified by Wit.ai, the best entity picks the reply
branch and factual questions are forwarded to Wolfram|Alpha. Nothing heavy
runs at import time; clients are built by the CLI (see ``apps/cli``).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
