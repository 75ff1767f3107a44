"""Ingestion layer.

This package turns inbound reading updates into a derived overall status
and the notification records they trigger. Nothing here touches storage;
merging and persistence live in :mod:`safedrive.state`.
"""

__all__: list[str] = []
