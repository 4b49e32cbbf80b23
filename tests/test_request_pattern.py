"""Tests for wiremock_helper.request_pattern.

Tests cover:
- Convenience factories and the URL field they emit
- Named collections (headers, cookies, query parameters)
- Body pattern ordering
- Omission of empty collections
"""

import pytest

from wiremock_helper.matchers import (
    absent,
    body_equal_to_json,
    body_matches_json_path,
    contains,
    does_not_match,
    equal_to,
    equal_to_ignore_case,
    matches,
    not_absent,
    url_equal_to,
    url_matching,
    url_path_equal_to,
    url_path_matching,
)
from wiremock_helper.request_pattern import (
    RequestMethod,
    for_delete_request_matching_url,
    for_get_request_matching_url,
    for_post_request_matching_url,
    for_put_request_matching_url,
    for_request_matching_url,
    request_for,
)

URL_FIELDS = {"url", "urlPattern", "urlPath", "urlPathPattern"}


class TestConvenienceFactories:
    @pytest.mark.parametrize(
        "factory,method",
        [
            (for_get_request_matching_url, "GET"),
            (for_post_request_matching_url, "POST"),
            (for_put_request_matching_url, "PUT"),
            (for_delete_request_matching_url, "DELETE"),
            (for_request_matching_url, "ANY"),
        ],
    )
    def test_method_and_url(self, factory, method):
        assert factory("/sample/path").build() == {"method": method, "url": "/sample/path"}


class TestUrlField:
    @pytest.mark.parametrize(
        "url_expression,field",
        [
            (url_equal_to("/sample/path"), "url"),
            (url_matching("/your/([a-z]*)\\?and=query"), "urlPattern"),
            (url_path_equal_to("/sample/path"), "urlPath"),
            (url_path_matching("/sample/.*"), "urlPathPattern"),
        ],
    )
    def test_exactly_one_url_field(self, url_expression, field):
        document = request_for(RequestMethod.TRACE, url_expression).build()
        assert URL_FIELDS & set(document) == {field}
        assert document[field] == url_expression.url
        assert document["method"] == "TRACE"


class TestNamedCollections:
    def test_empty_collections_are_omitted(self):
        document = for_get_request_matching_url("/x").build()
        assert "headers" not in document
        assert "cookies" not in document
        assert "queryParameters" not in document
        assert "bodyPatterns" not in document
        assert "basicAuthCredentials" not in document

    def test_query_param(self):
        document = (
            request_for(RequestMethod.ANY, url_equal_to("/sample/path"))
            .with_query_param("p", matches("[a-z]*_x"))
            .build()
        )
        assert document == {
            "method": "ANY",
            "url": "/sample/path",
            "queryParameters": {"p": {"matches": "[a-z]*_x"}},
        }

    def test_header_and_cookie_flatten_flags(self):
        document = (
            for_request_matching_url("/x")
            .with_header("absent-header", absent())
            .with_header("notAbsent-header", not_absent())
            .with_header("contains-header", contains("something"))
            .with_header("doesNotMatch-header", does_not_match("something"))
            .with_cookie("equalTo-cookie", equal_to_ignore_case("sOmEtHiNg"))
            .build()
        )
        assert document["headers"] == {
            "absent-header": {"absent": True},
            "notAbsent-header": {"absent": False},
            "contains-header": {"contains": "something"},
            "doesNotMatch-header": {"doesNotMatch": "something"},
        }
        assert document["cookies"] == {
            "equalTo-cookie": {"equalTo": "sOmEtHiNg", "caseInsensitive": True},
        }
        assert "queryParameters" not in document

    def test_last_write_wins(self):
        document = (
            for_request_matching_url("/x")
            .with_header("Accept", contains("xml"))
            .with_header("Accept", equal_to("application/json"))
            .build()
        )
        assert document["headers"] == {"Accept": {"equalTo": "application/json", "caseInsensitive": False}}


class TestBodyPatterns:
    def test_order_is_preserved(self):
        document = (
            for_post_request_matching_url("/orders")
            .with_request_body(body_matches_json_path("$.id"))
            .with_request_body(body_equal_to_json({"a": 1}))
            .with_request_body(contains("a"))
            .build()
        )
        assert document["bodyPatterns"] == [
            {"matchesJsonPath": "$.id"},
            {"equalToJson": {"a": 1}, "ignoreArrayOrder": True, "ignoreExtraElements": True},
            {"contains": "a"},
        ]


class TestBuild:
    def test_basic_auth(self):
        document = for_get_request_matching_url("/secure").with_basic_auth("user", "pass").build()
        assert document["basicAuthCredentials"] == {"username": "user", "password": "pass"}

    def test_build_returns_independent_documents(self):
        builder = for_get_request_matching_url("/x").with_header("A", contains("a"))
        first = builder.build()
        first["headers"]["B"] = {"contains": "b"}
        assert builder.build()["headers"] == {"A": {"contains": "a"}}
