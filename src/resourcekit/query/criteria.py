"""
Criteria map -> SQLAlchemy predicate.

`CriteriaQueryBuilder` is the default `QueryBuilder` collaborator:

    builder = CriteriaQueryBuilder(UserRole)
    builder.build_predicate({"name": "admin", "page": "0", "size": "10"})
    # -> user_role.name = :name_1        (pagination keys are ignored)

    builder.build_predicate({})
    # -> true()                          (no filter)

Every non-pagination key must be a column attribute of the model and becomes
an equality condition; conditions are ANDed. Values arrive as strings and are
coerced to the column's Python type before comparison.
"""
import logging
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping

from sqlalchemy import and_, true

from resourcekit.exceptions.base import InvalidArgumentError, InvalidFieldError
from resourcekit.services.pagination import PAGINATION_KEYS
from resourcekit.validators.model_validator import column_attributes, find_unknown_fields

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _to_bool(raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


# python_type -> parser. Anything not listed is compared as a plain string.
_COERCERS: dict[type, Callable[[str], Any]] = {
    bool: _to_bool,
    int: int,
    float: float,
    Decimal: Decimal,
    uuid.UUID: uuid.UUID,
    datetime: datetime.fromisoformat,
    date: date.fromisoformat,
}


class CriteriaQueryBuilder:
    """Translate string criteria into an AND of column equality conditions."""

    def __init__(self, model):
        self.model = model
        self._columns = column_attributes(model)

    def build_predicate(self, criteria: Mapping[str, str]) -> Any:
        """
        Raises:
            InvalidFieldError: A filter key is not a column of the model
            InvalidArgumentError: A value cannot be converted to the column type
        """
        filters = {k: v for k, v in (criteria or {}).items() if k not in PAGINATION_KEYS}
        if not filters:
            return true()

        unknown = find_unknown_fields(self.model, filters.keys())
        if unknown:
            logger.info(
                "query.unknown_fields",
                extra={"model": self.model.__name__, "fields": unknown},
            )
            raise InvalidFieldError(
                f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}",
                fields=unknown,
            )

        conditions = [
            getattr(self.model, key) == self._coerce(key, raw)
            for key, raw in filters.items()
        ]
        return and_(*conditions)

    def _coerce(self, key: str, raw: Any) -> Any:
        if raw is None or not isinstance(raw, str):
            return raw

        try:
            python_type = self._columns[key].type.python_type
        except NotImplementedError:
            return raw

        coercer = _COERCERS.get(python_type)
        if coercer is None:
            return raw

        try:
            return coercer(raw)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise InvalidArgumentError(
                f"Invalid value for '{key}': {raw!r} is not a valid {python_type.__name__}",
                fields=[key],
            ) from e
