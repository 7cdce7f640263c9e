import pytest

from tbldoc.naming import (
    default_parent_column_namer,
    default_parent_table_namer,
    identical_parent_column_namer,
    pluralize,
    select_naming_strategy,
    singular_table_parent_column_namer,
    singular_table_parent_table_namer,
    singularize,
)


def test_singular_table_parent_table_namer():
    assert singular_table_parent_table_namer("user_id") == "user"


def test_singular_table_parent_column_namer():
    assert singular_table_parent_column_namer("user_id") == "id"


def test_identical_parent_column_namer():
    assert identical_parent_column_namer("user_id") == "user_id"


def test_default_namers():
    assert default_parent_table_namer("user_id") == "users"
    assert default_parent_column_namer("user_id") == "id"


@pytest.mark.parametrize("name", ["user", "user_name", "id", "userid"])
def test_table_namers_require_id_suffix(name):
    assert default_parent_table_namer(name) == ""
    assert singular_table_parent_table_namer(name) == ""


@pytest.mark.parametrize("word", ["user", "category", "box", "person", "child", "post"])
def test_plural_singular_round_trip(word):
    assert singularize(pluralize(word)) == word


def test_pluralize_keeps_plurals_and_case():
    assert pluralize("users") == "users"
    assert pluralize("User") == "Users"
    assert pluralize("information") == "information"


def test_select_naming_strategy():
    default = select_naming_strategy("")
    assert default.parent_table_name("user_id") == "users"
    assert default.parent_column_name("user_id") == "id"
    assert select_naming_strategy("default") == default

    singular = select_naming_strategy("singularTableName")
    assert singular.parent_table_name("user_id") == "user"
    assert singular.parent_column_name("user_id") == "id"

    identical = select_naming_strategy("identical")
    assert identical.parent_table_name("user_id") == "users"
    assert identical.parent_column_name("user_id") == "user_id"

    both = select_naming_strategy("identicalSingularTableName")
    assert both.parent_table_name("user_id") == "user"
    assert both.parent_column_name("user_id") == "user_id"


def test_select_unknown_naming_strategy():
    with pytest.raises(ValueError, match="strategy: nope"):
        select_naming_strategy("nope")