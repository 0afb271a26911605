"""CloudScope HTTP API (Flask)."""
