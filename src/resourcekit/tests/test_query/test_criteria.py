import pytest
from sqlalchemy.sql.elements import True_

from resourcekit.exceptions import InvalidArgumentError, InvalidFieldError
from resourcekit.models.user_role import UserRole
from resourcekit.query.criteria import CriteriaQueryBuilder


@pytest.fixture
def builder():
    return CriteriaQueryBuilder(UserRole)


def test_empty_criteria_matches_everything(builder):
    assert isinstance(builder.build_predicate({}), True_)
    assert isinstance(builder.build_predicate(None), True_)


def test_pagination_keys_are_not_filters(builder):
    predicate = builder.build_predicate({"size": "10", "page": "0", "sortBy": "name", "sortDirection": "ASC"})
    assert isinstance(predicate, True_)


def test_single_filter_compiles_to_equality(builder):
    sql = str(builder.build_predicate({"name": "admin", "page": "0"}).compile(compile_kwargs={"literal_binds": True}))

    assert "user_role.name = 'admin'" in sql
    assert "page" not in sql


def test_filters_are_anded(builder):
    sql = str(builder.build_predicate({"name": "admin", "description": "root"}).compile(
        compile_kwargs={"literal_binds": True}
    ))

    assert "user_role.name = 'admin'" in sql
    assert "user_role.description = 'root'" in sql
    assert " AND " in sql


def test_unknown_keys_raise_invalid_field(builder):
    with pytest.raises(InvalidFieldError) as exc_info:
        builder.build_predicate({"name": "admin", "colour": "blue", "shape": "round"})

    assert exc_info.value.fields == ["colour", "shape"]
    assert exc_info.value.http_status() == 422


def test_uuid_values_are_coerced(builder):
    predicate = builder.build_predicate({"id": "1b4e28ba-2fa1-11d2-883f-0016d3cca427"})
    params = predicate.compile().params

    assert any(str(v) == "1b4e28ba-2fa1-11d2-883f-0016d3cca427" and not isinstance(v, str) for v in params.values())


def test_invalid_uuid_raises_invalid_argument(builder):
    with pytest.raises(InvalidArgumentError) as exc_info:
        builder.build_predicate({"id": "not-a-uuid"})

    assert exc_info.value.fields == ["id"]
    assert not isinstance(exc_info.value, InvalidFieldError)


def test_invalid_datetime_raises_invalid_argument(builder):
    with pytest.raises(InvalidArgumentError):
        builder.build_predicate({"created_at": "yesterday"})
