"""Allow ``python -m kong_reconciler``."""

from kong_reconciler.cli.main import app

app()
