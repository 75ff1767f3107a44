"""User account management over a JSON document store."""

from safedrive.accounts.operations import UserOperations
from safedrive.accounts.store import UserStore

__all__ = ["UserOperations", "UserStore"]
