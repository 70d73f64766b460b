"""Runtime settings and logging."""
