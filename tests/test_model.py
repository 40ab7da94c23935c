"""Tests for the @model decorator and module-level accessors."""

from dataclasses import dataclass, make_dataclass
from enum import Enum
from typing import Annotated

import pytest
from pydantic import BaseModel, Field

import sqlmeta
from sqlmeta.binds import BindPlan
from sqlmeta.core.dialect import Database
from sqlmeta.core.errors import (
    AmbiguousPrimaryKeyError,
    EmptyModelError,
    InvalidConfigError,
    ModelNotRegisteredError,
    SchemaError,
    UnknownDatabaseError,
    UnsupportedShapeError,
)
from sqlmeta.core.settings import DuplicateKeyPolicy
from sqlmeta.model import RESERVED_NAMES, columns, id_column, model, primary_key, schema_of, table_name
from sqlmeta.query import MySqlQuery, PostgresQuery, Query, SqliteQuery
from sqlmeta.registry import is_registered


@pytest.fixture
def User():
    @model(database="Postgres")
    @dataclass
    class User:
        id: Annotated[int, sqlmeta.Id]
        name: str
        email: str

    return User


class TestDecoratedDataclass:
    def test_class_accessors(self, User):
        assert User.table_name() == "user"
        assert User.id_column() == "id"
        assert User.columns() == ("id", "name", "email")

    def test_metadata_attached(self, User):
        meta = User.__sqlmeta__
        assert meta.database is Database.POSTGRES
        assert meta.schema_ident == "USER_SCHEMA"
        assert User.__sqlmeta_binds__ == BindPlan(
            insert=("id", "name", "email"), update=("name", "email", "id")
        )

    def test_insert_binds(self, User):
        user = User(1, "Ada", "ada@example.com")
        q = user.insert_binds(Query("INSERT INTO user VALUES (%s, %s, %s)"))
        assert q.arguments == (1, "Ada", "ada@example.com")

    def test_update_binds(self, User):
        user = User(1, "Ada", "ada@example.com")
        q = user.update_binds(Query("UPDATE user SET name = %s, email = %s WHERE id = %s"))
        assert q.arguments == ("Ada", "ada@example.com", 1)

    def test_primary_key(self, User):
        assert User(42, "Ada", "a@b").primary_key() == 42

    def test_query_uses_backend_builder(self, User):
        q = User.query("SELECT 1")
        assert isinstance(q, PostgresQuery)
        assert q.sql == "SELECT 1"

    def test_registered(self, User):
        assert is_registered(User)
        assert schema_of(User) is User.__sqlmeta__

    def test_binder_qualname(self, User):
        assert User.insert_binds.__qualname__.endswith("User.insert_binds")
        assert User.update_binds.__module__ == User.__module__

    def test_dataclass_behaviour_kept(self, User):
        assert User(1, "a", "b") == User(1, "a", "b")


class TestDecoratorForms:
    def test_bare_decorator_defaults(self):
        @model
        @dataclass
        class Tag:
            label: str
            weight: int

        assert Tag.id_column() == "label"
        assert Tag.__sqlmeta__.database is Database.SQLITE
        assert isinstance(Tag.query("SELECT 1"), SqliteQuery)

    def test_key_in_middle(self):
        @model(database="MySql")
        @dataclass
        class Account:
            name: str
            account_id: int = sqlmeta.id_field()
            email: str = ""

        account = Account("ops", 7, "ops@example.com")
        assert Account.id_column() == "account_id"
        assert account.insert_binds(Query("")).arguments == ("ops", 7, "ops@example.com")
        assert account.update_binds(Query("")).arguments == ("ops", "ops@example.com", 7)
        assert isinstance(Account.query(""), MySqlQuery)

    def test_external_id(self):
        @model(external_id=True)
        @dataclass
        class Event:
            event_id: str

        assert Event.__sqlmeta__.external_id is True

    def test_key_marker_beside_undefined_type(self):
        @model
        @dataclass
        class Order:
            customer: "Customer"  # noqa: F821
            order_id: "Annotated[int, sqlmeta.Id]"

        assert Order.id_column() == "order_id"
        assert Order.__sqlmeta__.id_type == "int"
        assert Order("acme", 5).update_binds(Query("")).arguments == ("acme", 5)

    def test_pydantic_model(self):
        @model(database="Mssql")
        class Invoice(BaseModel):
            customer: str
            number: str = Field(json_schema_extra={"id": True})
            total: int = 0

        invoice = Invoice(customer="acme", number="INV-1", total=10)
        assert Invoice.table_name() == "invoice"
        assert invoice.primary_key() == "INV-1"
        assert invoice.update_binds(Query("")).arguments == ("acme", 10, "INV-1")


class TestDecoratorErrors:
    def test_unknown_database(self):
        with pytest.raises(UnknownDatabaseError) as exc_info:

            @model(database="Oracle")
            @dataclass
            class User:
                id: int

        assert exc_info.value.context.type_name == "User"
        assert exc_info.value.context.source.endswith("User")

    def test_enum_rejected(self):
        with pytest.raises(UnsupportedShapeError):

            @model
            class Color(Enum):
                RED = 1

    def test_plain_class_rejected(self):
        with pytest.raises(UnsupportedShapeError):

            @model
            class Plain:
                id: int

    def test_empty_dataclass_rejected(self):
        with pytest.raises(EmptyModelError):

            @model
            @dataclass
            class Nothing:
                pass

    def test_duplicate_keys_rejected(self):
        with pytest.raises(AmbiguousPrimaryKeyError):

            @model
            @dataclass
            class Pair:
                left: Annotated[int, sqlmeta.Id]
                right: Annotated[int, sqlmeta.Id]

    def test_duplicate_keys_first_policy_argument(self):
        @model(duplicate_key_policy=DuplicateKeyPolicy.FIRST)
        @dataclass
        class Pair:
            left: Annotated[int, sqlmeta.Id]
            right: Annotated[int, sqlmeta.Id]

        assert Pair.id_column() == "left"

    def test_duplicate_keys_first_policy_from_env(self, monkeypatch):
        monkeypatch.setenv("SQLMETA_DUPLICATE_KEY_POLICY", "first")

        @model
        @dataclass
        class Pair:
            left: int
            right: Annotated[int, sqlmeta.Id]
            other: Annotated[int, sqlmeta.Id]

        assert Pair.id_column() == "right"

    def test_unknown_policy_argument(self):
        with pytest.raises(InvalidConfigError, match="duplicate_key_policy") as exc_info:

            @model(duplicate_key_policy="last")
            @dataclass
            class Pair:
                left: int

        assert exc_info.value.context.type_name == "Pair"

    @pytest.mark.parametrize("name", sorted(RESERVED_NAMES))
    def test_reserved_field_names(self, name):
        cls = make_dataclass("Clash", [("id", int), (name, str)])
        with pytest.raises(SchemaError, match=name):
            model(cls)
        assert not is_registered(cls)


class TestAccessors:
    def test_module_level_accessors(self, User):
        assert table_name(User) == "user"
        assert id_column(User) == "id"
        assert columns(User) == ("id", "name", "email")

    def test_schema_of_instance(self, User):
        assert schema_of(User(1, "a", "b")) is User.__sqlmeta__

    def test_primary_key_function(self, User):
        assert primary_key(User(9, "a", "b")) == 9

    def test_unregistered_class(self):
        @dataclass
        class Loose:
            id: int

        with pytest.raises(ModelNotRegisteredError):
            schema_of(Loose)
        with pytest.raises(ModelNotRegisteredError):
            primary_key(Loose(1))

    def test_package_exports(self, User):
        assert sqlmeta.table_name(User) == "user"
        assert sqlmeta.get_schema(User) is User.__sqlmeta__
