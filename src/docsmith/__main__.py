"""Entry point for running docsmith as a module.

Usage:
    python -m docsmith [command] [options]

Example:
    python -m docsmith render invoices.yaml --type invoice --format pdf
    python -m docsmith check
"""

from docsmith.cli import app

if __name__ == "__main__":
    app()
