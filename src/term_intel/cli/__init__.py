"""
CLI module for term-intel.

Provides command-line interface using Typer:
- comprehend: Explain a term or question from web search evidence
- config: Configuration management
"""

from term_intel.cli.main import app

__all__ = ["app"]
