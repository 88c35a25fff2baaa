"""forge-cli: Command-line interface for building Go Lambda functions."""

from __future__ import annotations

__version__ = "0.1.0"
