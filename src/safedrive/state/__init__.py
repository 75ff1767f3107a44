"""State/store layer.

This package is the single place where reading updates are merged into
the persisted snapshot, where the notification log is reconciled and
rendered, and where both documents are read from and written to disk.
"""
