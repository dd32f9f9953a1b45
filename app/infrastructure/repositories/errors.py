"""
Repository error taxonomy.

Callers branch on the exception class (or its kind), never on message text:
  NOT_FOUND - no row with the requested id
  STORAGE   - any other persistence failure (connectivity, constraint,
              decode, query execution)
"""
from enum import Enum


class RepositoryErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class RepositoryError(Exception):
    kind: RepositoryErrorKind


class NotFoundError(RepositoryError):
    kind = RepositoryErrorKind.NOT_FOUND

    def __init__(self, message: str = "requested item not found"):
        super().__init__(message)


class StorageError(RepositoryError):
    kind = RepositoryErrorKind.STORAGE

    def __init__(self, message: str = "database error"):
        super().__init__(message)
