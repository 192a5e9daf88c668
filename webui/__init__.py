"""Dash web UI for browsing a performance report."""
