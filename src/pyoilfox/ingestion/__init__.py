"""Ingestion layer.

This package turns raw OilFox payloads into normalized device records.
"""

__all__: list[str] = []
