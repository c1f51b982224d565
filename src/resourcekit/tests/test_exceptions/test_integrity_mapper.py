import sqlite3
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from resourcekit.exceptions import DuplicateError, NotFoundError, RepositoryError
from resourcekit.exceptions.integrity_classifier import ConstraintKind, classify_integrity_error
from resourcekit.exceptions.mapper import (
    db_error_handler,
    extract_columns_from_integrity,
    map_integrity_error,
)


class FakePgError(Exception):
    """Driver error shaped like psycopg's: SQLSTATE plus diagnostics."""

    def __init__(self, message, sqlstate, constraint_name=None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.diag = SimpleNamespace(constraint_name=constraint_name)


def integrity_error(orig):
    return IntegrityError("INSERT INTO user_role ...", {}, orig)


def test_sqlite_unique_violation_maps_to_duplicate():
    exc = integrity_error(sqlite3.IntegrityError("UNIQUE constraint failed: user_role.name"))

    mapped = map_integrity_error(exc, "UserRole")

    assert isinstance(mapped, DuplicateError)
    assert mapped.fields == ["name"]
    assert mapped.http_status() == 409
    assert mapped.message == "UserRole already exists for field(s): name"


def test_sqlite_not_null_violation_maps_to_repository_error():
    exc = integrity_error(sqlite3.IntegrityError("NOT NULL constraint failed: user_role.name"))

    mapped = map_integrity_error(exc, "UserRole")

    assert type(mapped) is RepositoryError
    assert mapped.fields == ["name"]
    assert mapped.http_status() == 500


def test_postgres_sqlstate_wins_over_message():
    orig = FakePgError(
        'duplicate key value violates unique constraint "user_role_name_key"\n'
        "DETAIL:  Key (name)=(admin) already exists.",
        sqlstate="23505",
        constraint_name="user_role_name_key",
    )

    kind, constraint = classify_integrity_error(integrity_error(orig))
    mapped = map_integrity_error(integrity_error(orig), "UserRole")

    assert kind is ConstraintKind.UNIQUE
    assert constraint == "user_role_name_key"
    assert isinstance(mapped, DuplicateError)
    assert mapped.fields == ["name"]
    assert mapped.constraint == "user_role_name_key"
    assert "constraint" not in mapped.to_payload()


def test_unknown_sqlstate_is_unknown_kind():
    kind, _ = classify_integrity_error(integrity_error(FakePgError("odd", sqlstate="23999")))
    assert kind is ConstraintKind.UNKNOWN


def test_message_without_column_yields_no_fields():
    assert extract_columns_from_integrity(integrity_error(sqlite3.IntegrityError("something broke"))) is None


@pytest.mark.asyncio
async def test_db_error_handler_translates_integrity_error():
    with pytest.raises(DuplicateError) as exc_info:
        async with db_error_handler("UserRole"):
            raise integrity_error(sqlite3.IntegrityError("UNIQUE constraint failed: user_role.name"))

    assert isinstance(exc_info.value.__cause__, IntegrityError)


@pytest.mark.asyncio
async def test_db_error_handler_passes_service_errors_through():
    with pytest.raises(NotFoundError):
        async with db_error_handler("UserRole"):
            raise NotFoundError("gone")


@pytest.mark.asyncio
async def test_db_error_handler_hides_unexpected_errors():
    with pytest.raises(RepositoryError) as exc_info:
        async with db_error_handler("UserRole"):
            raise OperationalError("SELECT 1", {}, sqlite3.OperationalError("database is locked"))

    assert exc_info.value.message == "Failed to operate on UserRole"
    assert "locked" not in str(exc_info.value)
