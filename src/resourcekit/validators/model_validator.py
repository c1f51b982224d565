"""
Column-rule validation for SQLAlchemy entities.

`ModelValidator` is the default `Validator` collaborator of `CrudService`. It
derives its rules from the table definition, so a model needs no extra
declarations:

| Rule      | Applies to                                                      | Violation message                                |
| --------- | --------------------------------------------------------------- | ------------------------------------------------ |
| required  | NOT NULL columns without client/server default, not primary key | "name must not be null"                          |
| length    | String(n) columns holding a str value                           | "name length must be at most 100 (got 120)"      |

The helpers below are shared with the criteria query builder.
"""
from typing import Any, Iterable

from sqlalchemy import String
from sqlalchemy import inspect as sa_inspect


def column_attributes(model) -> dict[str, Any]:
    """
    Map attribute key -> Column for every column-backed attribute of a model.
    Attribute keys are what callers use; they can differ from column names.
    """
    mapper = sa_inspect(model)
    return {attr.key: attr.columns[0] for attr in mapper.column_attrs}


def find_unknown_fields(model, keys: Iterable[str]) -> list[str]:
    """
    Return the keys that are not column attributes of the model.
    - model: the SQLAlchemy model class (not instance)
    """
    allowed = column_attributes(model)
    return [k for k in keys if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Attribute keys of columns that are NOT NULL, have no server/client default
    and are not primary keys.
    """
    required = []
    for key, col in column_attributes(model).items():
        has_default = col.default is not None or col.server_default is not None
        if not col.nullable and not has_default and not col.primary_key:
            required.append(key)
    return required


def get_length_limits(model) -> dict[str, int]:
    """Attribute key -> maximum length, for String columns declared with a length."""
    return {
        key: col.type.length
        for key, col in column_attributes(model).items()
        if isinstance(col.type, String) and col.type.length is not None
    }


class ModelValidator:
    """
    Validate an entity instance against its model's column rules.

    Example:
        validator = ModelValidator(UserRole)
        validator.validate(UserRole(name=None))   # ["name must not be null"]
    """

    def __init__(self, model):
        self.model = model
        # Rules are fixed per model; compute them once.
        self._required = get_required_columns(model)
        self._length_limits = get_length_limits(model)

    def validate(self, entity) -> list[str]:
        violations: list[str] = []

        for key in self._required:
            if getattr(entity, key, None) is None:
                violations.append(f"{key} must not be null")

        for key, limit in self._length_limits.items():
            value = getattr(entity, key, None)
            if isinstance(value, str) and len(value) > limit:
                violations.append(f"{key} length must be at most {limit} (got {len(value)})")

        return violations
