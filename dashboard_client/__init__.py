"""Async client used by the admin and vendor dashboards."""
