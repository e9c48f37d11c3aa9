from __future__ import annotations

"""Command line entry point: ``python -m dojo_import.cli FILE``."""
