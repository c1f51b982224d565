# resourcekit/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # Service-level error taxonomy (NotFoundError, InvalidArgumentError, ...)
# │   ├── integrity_classifier.py    # SQL-level / DB-specific constraint classification
# │   └── mapper.py                  # Map DB errors to service-level errors (db_error_handler)

from .base import (
    ResourceError,
    NotFoundError,
    InvalidArgumentError,
    InvalidFieldError,
    ResourceCreationFailedError,
    RepositoryError,
    DuplicateError,
)

__all__ = [
    "ResourceError",
    "NotFoundError",
    "InvalidArgumentError",
    "InvalidFieldError",
    "ResourceCreationFailedError",
    "RepositoryError",
    "DuplicateError",
]
