"""Custom exception hierarchy for personstore."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

# Driver failures are surfaced to callers untranslated.
StorageError = PyMongoError


class PersonStoreError(Exception):
    """Base application error carrying a machine readable code."""

    code: str = "personstore_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message


class ConfigError(PersonStoreError):
    code = "config_error"


class DatabaseConnectionError(PersonStoreError):
    code = "connection_error"


class NotFoundError(PersonStoreError):
    code = "not_found"


class ValidationError(PersonStoreError):
    """Raised when a record does not satisfy the Person schema."""

    code = "validation_error"

    def __init__(self, message: str, *, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        if self.errors:
            fields = ", ".join(".".join(str(part) for part in error.get("loc", ())) for error in self.errors)
            return f"[{self.code}] {self.message} :: {fields}"
        return f"[{self.code}] {self.message}"
