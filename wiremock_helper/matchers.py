"""Match expressions - single matching conditions for request fields.

A MatchExpression is a condition tag, a value and an ordered tuple of
auxiliary flags. Builders never inspect the flags; they only call
to_document() when assembling the request pattern.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class MatchExpressionError(ValueError):
    """Raised when a match expression cannot be created from its input."""


class MatchCondition(str, Enum):
    """Condition keys understood by the Wiremock request matcher."""

    EQUAL_TO = "equalTo"
    CONTAINS = "contains"
    MATCHES = "matches"
    DOES_NOT_MATCH = "doesNotMatch"
    ABSENT = "absent"
    EQUAL_TO_JSON = "equalToJson"
    MATCHES_JSON_PATH = "matchesJsonPath"
    EQUAL_TO_XML = "equalToXml"
    MATCHES_XPATH = "matchesXPath"


class UrlMatchCondition(str, Enum):
    """Request pattern field that carries the URL condition."""

    EQUAL_TO = "url"
    MATCHING = "urlPattern"
    PATH_EQUAL_TO = "urlPath"
    PATH_MATCHING = "urlPathPattern"


class MatchExpression(BaseModel):
    """One matching condition plus its auxiliary flags.

    Flags are kept as an ordered tuple of (name, value) pairs so the emitted
    document lists them in the order the factory set them.
    """

    model_config = ConfigDict(frozen=True)

    condition: MatchCondition
    value: Any
    properties: tuple[tuple[str, Any], ...] = ()

    def to_document(self) -> dict[str, Any]:
        """Flatten into `{condition: value, flag: value, ...}`."""
        document: dict[str, Any] = {self.condition.value: self.value}
        for name, flag in self.properties:
            document[name] = flag
        return document


class UrlMatchExpression(BaseModel):
    """URL condition; exactly one URL field ends up in the request pattern."""

    model_config = ConfigDict(frozen=True)

    url: str
    condition: UrlMatchCondition


# =============================================================================
# URL factories
# =============================================================================


def url_equal_to(url: str) -> UrlMatchExpression:
    """Match the full URL (path and query) exactly."""
    return UrlMatchExpression(url=url, condition=UrlMatchCondition.EQUAL_TO)


def url_matching(regexp: str) -> UrlMatchExpression:
    """Match the full URL against a regular expression."""
    return UrlMatchExpression(url=regexp, condition=UrlMatchCondition.MATCHING)


def url_path_equal_to(path: str) -> UrlMatchExpression:
    """Match the path only, ignoring the query string."""
    return UrlMatchExpression(url=path, condition=UrlMatchCondition.PATH_EQUAL_TO)


def url_path_matching(regexp: str) -> UrlMatchExpression:
    return UrlMatchExpression(url=regexp, condition=UrlMatchCondition.PATH_MATCHING)


# =============================================================================
# Value factories
# =============================================================================


def equal_to(expected: str, case_insensitive: bool = False) -> MatchExpression:
    return MatchExpression(
        condition=MatchCondition.EQUAL_TO,
        value=expected,
        properties=(("caseInsensitive", case_insensitive),),
    )


def equal_to_ignore_case(expected: str) -> MatchExpression:
    return equal_to(expected, case_insensitive=True)


equal_to_ignore_cases = equal_to_ignore_case


def contains(expected: str) -> MatchExpression:
    return MatchExpression(condition=MatchCondition.CONTAINS, value=expected)


def matches(regexp: str) -> MatchExpression:
    return MatchExpression(condition=MatchCondition.MATCHES, value=regexp)


def does_not_match(regexp: str) -> MatchExpression:
    return MatchExpression(condition=MatchCondition.DOES_NOT_MATCH, value=regexp)


def absent() -> MatchExpression:
    """The field must not be present in the request."""
    return MatchExpression(condition=MatchCondition.ABSENT, value=True)


def not_absent() -> MatchExpression:
    """The field must be present, with any value."""
    return MatchExpression(condition=MatchCondition.ABSENT, value=False)


# =============================================================================
# Body factories
# =============================================================================


def body_equal_to_json(
    json_value: Any,
    ignore_array_order: bool = True,
    ignore_extra_elements: bool = True,
) -> MatchExpression:
    """Semantic JSON equality against an already-parsed value.

    Args:
        json_value: Expected JSON document (dict, list or scalar).
        ignore_array_order: Treat arrays as unordered collections.
        ignore_extra_elements: Allow fields in the request that are not
            in the expected document.
    """
    return MatchExpression(
        condition=MatchCondition.EQUAL_TO_JSON,
        value=json_value,
        properties=(
            ("ignoreArrayOrder", ignore_array_order),
            ("ignoreExtraElements", ignore_extra_elements),
        ),
    )


def body_equal_to_json_string(
    json_text: str,
    ignore_array_order: bool = True,
    ignore_extra_elements: bool = True,
) -> MatchExpression:
    """Same as body_equal_to_json, parsing the expected document from text.

    Raises:
        MatchExpressionError: If json_text is not valid JSON.
    """
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MatchExpressionError(f"Invalid JSON for equalToJson: {e}") from e
    return body_equal_to_json(parsed, ignore_array_order, ignore_extra_elements)


def body_matches_json_path(json_path: str) -> MatchExpression:
    return MatchExpression(condition=MatchCondition.MATCHES_JSON_PATH, value=json_path)


def body_matches_json_path_expression(json_path: str, expression: MatchExpression) -> MatchExpression:
    """Apply another match expression to the value selected by a JSONPath.

    body_matches_json_path_expression("$.name", contains("x")) yields
    {"matchesJsonPath": {"expression": "$.name", "contains": "x"}}.
    """
    return _nested_expression(MatchCondition.MATCHES_JSON_PATH, json_path, expression)


def body_equal_to_xml_string(
    xml: str,
    enable_placeholders: bool = False,
    placeholder_opening_delimiter_regex: str | None = None,
    placeholder_closing_delimiter_regex: str | None = None,
    exempted_comparisons: list[str] | None = None,
) -> MatchExpression:
    """Semantic XML equality.

    Placeholder delimiters and exempted comparisons are only emitted when
    given; enablePlaceholders is always emitted.
    """
    properties: list[tuple[str, Any]] = [("enablePlaceholders", enable_placeholders)]
    if placeholder_opening_delimiter_regex is not None:
        properties.append(("placeholderOpeningDelimiterRegex", placeholder_opening_delimiter_regex))
    if placeholder_closing_delimiter_regex is not None:
        properties.append(("placeholderClosingDelimiterRegex", placeholder_closing_delimiter_regex))
    if exempted_comparisons is not None:
        properties.append(("exemptedComparisons", list(exempted_comparisons)))
    return MatchExpression(
        condition=MatchCondition.EQUAL_TO_XML,
        value=xml,
        properties=tuple(properties),
    )


def body_matches_xpath(xpath: str) -> MatchExpression:
    return MatchExpression(condition=MatchCondition.MATCHES_XPATH, value=xpath)


def body_matches_xpath_expression(xpath: str, expression: MatchExpression) -> MatchExpression:
    """Apply another match expression to the node selected by an XPath."""
    return _nested_expression(MatchCondition.MATCHES_XPATH, xpath, expression)


def _nested_expression(
    condition: MatchCondition,
    selector: str,
    expression: MatchExpression,
) -> MatchExpression:
    # Inner expression is flattened next to the selector; outer flags stay empty.
    value: dict[str, Any] = {"expression": selector}
    value.update(expression.to_document())
    return MatchExpression(condition=condition, value=value)
