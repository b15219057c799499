"""Entry point for running PR Review Helper as a module.

Usage:
    python -m prreview [command] [options]

Example:
    python -m prreview analyze acme/widgets --pr 7
    python -m prreview metrics acme/widgets --type quality
"""

from prreview.cli import app

if __name__ == "__main__":
    app()
