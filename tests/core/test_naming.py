"""Tests for identifier case conversion."""

import pytest

from sqlmeta.core.naming import to_screaming_snake_case, to_snake_case, to_table_case


class TestToTableCase:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("User", "user"),
            ("UserAccount", "user_account"),
            ("userAccount", "user_account"),
            ("HTTPRequestLog", "http_request_log"),
            ("Item2Tag", "item2_tag"),
            ("ABC", "abc"),
            ("already_snake", "already_snake"),
            ("My-Type", "my_type"),
            ("Order Line", "order_line"),
            ("_Private", "private"),
        ],
    )
    def test_conversion(self, identifier, expected):
        assert to_table_case(identifier) == expected

    def test_no_pluralization(self):
        assert to_table_case("Person") == "person"
        assert to_table_case("Category") == "category"

    def test_table_case_is_snake_case(self):
        assert to_table_case("OrderLine") == to_snake_case("OrderLine")


class TestScreamingSnakeCase:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("User", "USER"),
            ("UserAccount", "USER_ACCOUNT"),
            ("HTTPRequest", "HTTP_REQUEST"),
        ],
    )
    def test_conversion(self, identifier, expected):
        assert to_screaming_snake_case(identifier) == expected
