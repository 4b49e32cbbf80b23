"""Stub Mapping Builder - pairs a request pattern with a response definition."""

from __future__ import annotations

from typing import Any, Self

from wiremock_helper.request_pattern import RequestPatternBuilder
from wiremock_helper.response_definition import (
    ResponseDefinitionBuilder,
    for_not_found_response,
    for_ok_response,
)


class StubMappingBuilder:
    """Builds the stub mapping document submitted to the admin API.

    Stub-level fields (priority, scenario states, metadata) are optional and
    left out of the document unless set.
    """

    def __init__(
        self,
        request_builder: RequestPatternBuilder,
        response_builder: ResponseDefinitionBuilder,
    ) -> None:
        self._request_builder = request_builder
        self._response_builder = response_builder
        self._fields: dict[str, Any] = {}

    def with_id(self, mapping_id: str) -> Self:
        self._fields["id"] = mapping_id
        return self

    def with_priority(self, priority: int) -> Self:
        """Lower numbers win when several stubs match (1 is highest)."""
        self._fields["priority"] = priority
        return self

    def in_scenario(self, scenario_name: str) -> Self:
        self._fields["scenarioName"] = scenario_name
        return self

    def when_scenario_state_is(self, state: str) -> Self:
        self._fields["requiredScenarioState"] = state
        return self

    def will_set_state_to(self, state: str) -> Self:
        self._fields["newScenarioState"] = state
        return self

    def with_metadata(self, metadata: dict[str, Any]) -> Self:
        self._fields["metadata"] = metadata
        return self

    def persistent(self, flag: bool = True) -> Self:
        self._fields["persistent"] = flag
        return self

    def build(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "request": self._request_builder.build(),
            "response": self._response_builder.build(),
        }
        document.update(self._fields)
        return document


def stub_for(
    request_builder: RequestPatternBuilder,
    response_builder: ResponseDefinitionBuilder,
) -> dict[str, Any]:
    return StubMappingBuilder(request_builder, response_builder).build()


def stub_for_ok_response_with_body(request_builder: RequestPatternBuilder, body: str | None = None) -> dict[str, Any]:
    """200 Ok with an optional text body."""
    return stub_for(request_builder, for_ok_response(body))


def stub_for_ok_response_with_referred_body(request_builder: RequestPatternBuilder, file_name: str) -> dict[str, Any]:
    """200 Ok whose body is read from `file_name` in the server's file store.

    WiremockClient.add_mapping uploads the file before creating the mapping.
    """
    return stub_for(request_builder, for_ok_response().with_referred_body(file_name))


def stub_for_not_found_response(request_builder: RequestPatternBuilder) -> dict[str, Any]:
    return stub_for(request_builder, for_not_found_response())
