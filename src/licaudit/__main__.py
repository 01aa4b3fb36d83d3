"""Entry point for running licaudit as a module.

Usage:
    python -m licaudit [options] targets...

Example:
    python -m licaudit --format csv ./...
    python -m licaudit --licenses-dir third_party/licenses ./cmd/server
"""

from licaudit.cli import app

if __name__ == "__main__":
    app()
