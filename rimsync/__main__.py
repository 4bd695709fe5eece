"""Allow running rimsync as ``python -m rimsync``."""

from rimsync.cli.main import app

if __name__ == "__main__":
    app()
