"""Entry point for running Vista as a module.

Usage:
    python -m vista [command] [options]

Example:
    python -m vista render users --locals users.yaml
    python -m vista lookup layouts/app
"""

from vista.cli import app

if __name__ == "__main__":
    app()
