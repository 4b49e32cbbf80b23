"""Request Pattern Builder - assembles request-matching documents.

The builder collects a method, one URL condition, named match expressions
for headers, cookies and query parameters, and an ordered list of body
patterns. build() returns a plain dict ready to be JSON-encoded.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Self

from wiremock_helper.matchers import MatchExpression, UrlMatchExpression, url_equal_to


class RequestMethod(str, Enum):
    """HTTP methods accepted by the request matcher. ANY matches all of them."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"
    ANY = "ANY"


class RequestPatternBuilder:
    """Fluent builder for a request pattern document.

    Usage:
        pattern = (
            request_for(RequestMethod.GET, url_path_equal_to("/items"))
            .with_query_param("page", matches("[0-9]+"))
            .with_header("Accept", contains("json"))
            .build()
        )

    Named collections keep the last expression set for a name. Body patterns
    are appended and keep their order.
    """

    def __init__(self, method: RequestMethod, url_expression: UrlMatchExpression) -> None:
        self._method = method
        self._url_expression = url_expression
        self._query_parameters: dict[str, MatchExpression] = {}
        self._headers: dict[str, MatchExpression] = {}
        self._cookies: dict[str, MatchExpression] = {}
        self._body_patterns: list[MatchExpression] = []
        self._basic_auth: tuple[str, str] | None = None

    def with_header(self, name: str, expression: MatchExpression) -> Self:
        self._headers[name] = expression
        return self

    def with_cookie(self, name: str, expression: MatchExpression) -> Self:
        self._cookies[name] = expression
        return self

    def with_query_param(self, name: str, expression: MatchExpression) -> Self:
        self._query_parameters[name] = expression
        return self

    def with_request_body(self, expression: MatchExpression) -> Self:
        """Add a body pattern. All body patterns must match."""
        self._body_patterns.append(expression)
        return self

    def with_basic_auth(self, username: str, password: str) -> Self:
        self._basic_auth = (username, password)
        return self

    def build(self) -> dict[str, Any]:
        """Build the request pattern document.

        Empty named collections and an empty body pattern list are left out
        of the document entirely.
        """
        document: dict[str, Any] = {
            "method": self._method.value,
            self._url_expression.condition.value: self._url_expression.url,
        }

        for field_name, expressions in (
            ("queryParameters", self._query_parameters),
            ("cookies", self._cookies),
            ("headers", self._headers),
        ):
            if expressions:
                document[field_name] = _named_documents(expressions)

        if self._body_patterns:
            document["bodyPatterns"] = [expression.to_document() for expression in self._body_patterns]

        if self._basic_auth is not None:
            username, password = self._basic_auth
            document["basicAuthCredentials"] = {"username": username, "password": password}

        return document


def _named_documents(expressions: dict[str, MatchExpression]) -> dict[str, dict[str, Any]]:
    return {name: expression.to_document() for name, expression in expressions.items()}


def request_for(method: RequestMethod, url_expression: UrlMatchExpression) -> RequestPatternBuilder:
    return RequestPatternBuilder(method, url_expression)


def for_request_matching_url(url: str) -> RequestPatternBuilder:
    """Any HTTP method, URL equal to `url`."""
    return request_for(RequestMethod.ANY, url_equal_to(url))


def for_get_request_matching_url(url: str) -> RequestPatternBuilder:
    return request_for(RequestMethod.GET, url_equal_to(url))


def for_post_request_matching_url(url: str) -> RequestPatternBuilder:
    return request_for(RequestMethod.POST, url_equal_to(url))


def for_put_request_matching_url(url: str) -> RequestPatternBuilder:
    return request_for(RequestMethod.PUT, url_equal_to(url))


def for_delete_request_matching_url(url: str) -> RequestPatternBuilder:
    return request_for(RequestMethod.DELETE, url_equal_to(url))
