"""Fluent builders and an async client for the Wiremock admin API."""

from wiremock_helper.client import (
    AdminResponseError,
    AdminTransportError,
    AdminValidationError,
    BodyFileNotFoundError,
    MappingNotFoundError,
    WiremockClient,
    WiremockError,
)
from wiremock_helper.matchers import (
    MatchExpressionError,
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
from wiremock_helper.models import ClientConfig, DelayDistribution, Fault, StubMapping
from wiremock_helper.request_journal import RequestJournalHelper
from wiremock_helper.request_pattern import (
    RequestMethod,
    RequestPatternBuilder,
    for_delete_request_matching_url,
    for_get_request_matching_url,
    for_post_request_matching_url,
    for_put_request_matching_url,
    for_request_matching_url,
    request_for,
)
from wiremock_helper.response_definition import (
    ResponseDefinitionBuilder,
    for_connection_reset_by_peer_fault,
    for_empty_response_fault,
    for_error_response,
    for_malformed_response_chunk_fault,
    for_not_found_response,
    for_ok_response,
    for_random_data_then_close_fault,
    response_for,
)
from wiremock_helper.stub_mapping import (
    StubMappingBuilder,
    stub_for,
    stub_for_not_found_response,
    stub_for_ok_response_with_body,
    stub_for_ok_response_with_referred_body,
)

__all__ = [
    "AdminResponseError",
    "AdminTransportError",
    "AdminValidationError",
    "BodyFileNotFoundError",
    "ClientConfig",
    "DelayDistribution",
    "Fault",
    "MappingNotFoundError",
    "MatchExpressionError",
    "RequestJournalHelper",
    "RequestMethod",
    "RequestPatternBuilder",
    "ResponseDefinitionBuilder",
    "StubMapping",
    "StubMappingBuilder",
    "WiremockClient",
    "WiremockError",
    "absent",
    "body_equal_to_json",
    "body_equal_to_json_string",
    "body_equal_to_xml_string",
    "body_matches_json_path",
    "body_matches_json_path_expression",
    "body_matches_xpath",
    "body_matches_xpath_expression",
    "contains",
    "does_not_match",
    "equal_to",
    "equal_to_ignore_case",
    "equal_to_ignore_cases",
    "for_connection_reset_by_peer_fault",
    "for_delete_request_matching_url",
    "for_empty_response_fault",
    "for_error_response",
    "for_get_request_matching_url",
    "for_malformed_response_chunk_fault",
    "for_not_found_response",
    "for_ok_response",
    "for_post_request_matching_url",
    "for_put_request_matching_url",
    "for_random_data_then_close_fault",
    "for_request_matching_url",
    "matches",
    "not_absent",
    "request_for",
    "response_for",
    "stub_for",
    "stub_for_not_found_response",
    "stub_for_ok_response_with_body",
    "stub_for_ok_response_with_referred_body",
    "url_equal_to",
    "url_matching",
    "url_path_equal_to",
    "url_path_matching",
]
