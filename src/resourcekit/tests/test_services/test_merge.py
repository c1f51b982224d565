import uuid
from datetime import datetime, timezone

import pytest

from resourcekit.models.user_role import UserRole
from resourcekit.services.merge import merge_fields_of, merge_source_to_target


@pytest.fixture
def stored_role():
    return UserRole(
        id=uuid.uuid4(),
        name="admin",
        description="root access",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_none_fields_are_filled_from_source(stored_role):
    incoming = UserRole(id=stored_role.id, description="full access")

    merge_source_to_target(stored_role, incoming, UserRole.MERGE_FIELDS)

    assert incoming.name == "admin"
    assert incoming.description == "full access"
    assert incoming.created_at == stored_role.created_at
    assert incoming.updated_at is None


def test_source_is_left_untouched(stored_role):
    incoming = UserRole(id=stored_role.id, name="operator")

    merge_source_to_target(stored_role, incoming, UserRole.MERGE_FIELDS)

    assert stored_role.name == "admin"
    assert stored_role.description == "root access"


def test_merge_is_idempotent(stored_role):
    incoming = UserRole(id=stored_role.id, name="operator")

    merge_source_to_target(stored_role, incoming, UserRole.MERGE_FIELDS)
    first = {f: getattr(incoming, f) for f in UserRole.MERGE_FIELDS}
    merge_source_to_target(stored_role, incoming, UserRole.MERGE_FIELDS)

    assert {f: getattr(incoming, f) for f in UserRole.MERGE_FIELDS} == first


def test_only_listed_fields_are_merged(stored_role):
    incoming = UserRole(id=stored_role.id)

    merge_source_to_target(stored_role, incoming, ("name",))

    assert incoming.name == "admin"
    assert incoming.description is None


def test_merge_fields_of_reads_instance_and_class():
    assert merge_fields_of(UserRole) == ("id", "created_at", "updated_at", "deleted_at", "name", "description")
    assert merge_fields_of(UserRole(name="x")) == merge_fields_of(UserRole)


def test_merge_fields_of_requires_declaration():
    class Bare:
        pass

    with pytest.raises(TypeError, match="Bare does not declare MERGE_FIELDS"):
        merge_fields_of(Bare())
