"""Command-line interface for rimsync."""
