"""CLI package for the NoCaptcha client

Provides a terminal presentation shell around the verifier.
"""

from cli.main import main
from cli.shell import ConsoleShell, TouchPrompt

__all__ = [
    "ConsoleShell",
    "TouchPrompt",
    "main",
]
