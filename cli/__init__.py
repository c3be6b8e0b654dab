"""CLI package for the BPB deployment wizard

This package provides the interactive command-line wizard that logs in to
Cloudflare and deploys the panel worker.
"""

from cli.cli_app import DeployerCLI
from cli.main import main

__all__ = [
    "DeployerCLI",
    "main",
]
