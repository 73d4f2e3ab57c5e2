"""Shared utilities: logging and process-level settings.

Rules
-----
* No boundary logic.
* No imports from ``core`` or ``trace``.
* Importable by any layer.
"""
