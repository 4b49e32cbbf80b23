"""Tests for wiremock_helper.matchers.

Tests cover:
- Document shape of every value and body factory
- Auxiliary flag defaults and ordering
- Nested JSONPath / XPath expressions
- Invalid JSON text for equalToJson
"""

import pytest
from pydantic import ValidationError

from wiremock_helper.matchers import (
    MatchCondition,
    MatchExpression,
    MatchExpressionError,
    UrlMatchCondition,
    absent,
    body_equal_to_json,
    body_equal_to_json_string,
    body_equal_to_xml_string,
    body_matches_json_path,
    body_matches_json_path_expression,
    body_matches_xpath,
    body_matches_xpath_expression,
    contains,
    does_not_match,
    equal_to,
    equal_to_ignore_case,
    equal_to_ignore_cases,
    matches,
    not_absent,
    url_equal_to,
    url_matching,
    url_path_equal_to,
    url_path_matching,
)


class TestValueFactories:
    def test_equal_to_defaults_to_case_sensitive(self):
        assert equal_to("value").to_document() == {"equalTo": "value", "caseInsensitive": False}

    def test_equal_to_ignore_case(self):
        assert equal_to_ignore_case("VaLuE").to_document() == {"equalTo": "VaLuE", "caseInsensitive": True}

    def test_equal_to_ignore_cases_alias(self):
        assert equal_to_ignore_cases("x") == equal_to_ignore_case("x")

    def test_contains(self):
        assert contains("something").to_document() == {"contains": "something"}

    def test_matches(self):
        assert matches("[a-z]*_x").to_document() == {"matches": "[a-z]*_x"}

    def test_does_not_match(self):
        assert does_not_match("^admin").to_document() == {"doesNotMatch": "^admin"}

    def test_absent_and_not_absent_share_condition(self):
        assert absent().to_document() == {"absent": True}
        assert not_absent().to_document() == {"absent": False}
        assert absent().condition == not_absent().condition == MatchCondition.ABSENT


class TestBodyFactories:
    def test_equal_to_json_default_flags(self):
        assert body_equal_to_json({"a": 1}).to_document() == {
            "equalToJson": {"a": 1},
            "ignoreArrayOrder": True,
            "ignoreExtraElements": True,
        }

    def test_equal_to_json_string_matches_parsed_value(self):
        assert body_equal_to_json_string('{"a":1}') == body_equal_to_json({"a": 1})

    def test_equal_to_json_string_passes_flags(self):
        document = body_equal_to_json_string("[1, 2]", ignore_array_order=False).to_document()
        assert document["equalToJson"] == [1, 2]
        assert document["ignoreArrayOrder"] is False
        assert document["ignoreExtraElements"] is True

    def test_equal_to_json_string_invalid_text(self):
        with pytest.raises(MatchExpressionError, match="Invalid JSON"):
            body_equal_to_json_string("{not json")

    def test_invalid_json_error_is_value_error(self):
        with pytest.raises(ValueError):
            body_equal_to_json_string("")

    def test_matches_json_path(self):
        assert body_matches_json_path("$.items[0]").to_document() == {"matchesJsonPath": "$.items[0]"}

    def test_matches_json_path_expression(self):
        expression = body_matches_json_path_expression("$.name", contains("x"))
        assert expression.to_document() == {"matchesJsonPath": {"expression": "$.name", "contains": "x"}}

    def test_matches_json_path_expression_carries_inner_flags(self):
        expression = body_matches_json_path_expression("$.name", equal_to("Bob"))
        assert expression.to_document() == {
            "matchesJsonPath": {"expression": "$.name", "equalTo": "Bob", "caseInsensitive": False}
        }

    def test_matches_xpath(self):
        assert body_matches_xpath("/order/id").to_document() == {"matchesXPath": "/order/id"}

    def test_matches_xpath_expression(self):
        expression = body_matches_xpath_expression("/order/id", matches("[0-9]+"))
        assert expression.to_document() == {"matchesXPath": {"expression": "/order/id", "matches": "[0-9]+"}}

    def test_equal_to_xml_minimal(self):
        assert body_equal_to_xml_string("<a/>").to_document() == {
            "equalToXml": "<a/>",
            "enablePlaceholders": False,
        }

    def test_equal_to_xml_with_placeholders(self):
        document = body_equal_to_xml_string(
            "<a>[[x]]</a>",
            enable_placeholders=True,
            placeholder_opening_delimiter_regex=r"\[\[",
            placeholder_closing_delimiter_regex=r"]]",
            exempted_comparisons=["NAMESPACE_URI"],
        ).to_document()
        assert list(document) == [
            "equalToXml",
            "enablePlaceholders",
            "placeholderOpeningDelimiterRegex",
            "placeholderClosingDelimiterRegex",
            "exemptedComparisons",
        ]
        assert document["exemptedComparisons"] == ["NAMESPACE_URI"]


class TestMatchExpression:
    def test_is_immutable(self):
        expression = contains("x")
        with pytest.raises(ValidationError):
            expression.value = "y"

    def test_properties_keep_order(self):
        expression = MatchExpression(
            condition=MatchCondition.EQUAL_TO,
            value="v",
            properties=(("b", 1), ("a", 2)),
        )
        assert list(expression.to_document()) == ["equalTo", "b", "a"]


class TestUrlFactories:
    @pytest.mark.parametrize(
        "factory,condition",
        [
            (url_equal_to, UrlMatchCondition.EQUAL_TO),
            (url_matching, UrlMatchCondition.MATCHING),
            (url_path_equal_to, UrlMatchCondition.PATH_EQUAL_TO),
            (url_path_matching, UrlMatchCondition.PATH_MATCHING),
        ],
    )
    def test_condition(self, factory, condition):
        expression = factory("/sample/path")
        assert expression.url == "/sample/path"
        assert expression.condition == condition
