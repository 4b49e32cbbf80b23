"""Response Definition Builder - assembles response documents.

The body is held as exactly one variant (text, JSON, file reference or
base64), so a built document can never carry two body fields.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, ClassVar, Self

from wiremock_helper.models import DelayDistribution, Fault


# =============================================================================
# Body Variants
# =============================================================================


@dataclass(frozen=True)
class TextBody:
    field_name: ClassVar[str] = "body"
    text: str

    def wire_value(self) -> Any:
        return self.text


@dataclass(frozen=True)
class JsonBody:
    field_name: ClassVar[str] = "jsonBody"
    value: Any

    def wire_value(self) -> Any:
        return self.value


@dataclass(frozen=True)
class FileBody:
    """Body served from a file in the server's `__files` store."""

    field_name: ClassVar[str] = "bodyFileName"
    file_name: str

    def wire_value(self) -> Any:
        return self.file_name


@dataclass(frozen=True)
class Base64Body:
    field_name: ClassVar[str] = "base64Body"
    data: str

    def wire_value(self) -> Any:
        return self.data


ResponseBody = TextBody | JsonBody | FileBody | Base64Body


# =============================================================================
# Builder
# =============================================================================


class ResponseDefinitionBuilder:
    """Fluent builder for a response definition document.

    Usage:
        response = (
            ResponseDefinitionBuilder(201, "Created")
            .with_json_body({"id": 7})
            .with_header("Content-Type", "application/json")
            .build()
        )

    Every body setter replaces the previous body, whatever its kind.
    """

    def __init__(self, status: int | None = None, status_message: str | None = None) -> None:
        self._status = status
        self._status_message = status_message
        self._body: ResponseBody | None = None
        self._headers: dict[str, str] = {}
        self._proxy_headers: dict[str, str | None] = {}
        self._fixed_delay_ms: int | None = None
        self._delay_distribution: DelayDistribution | None = None
        self._proxy_base_url: str | None = None
        self._fault: Fault | None = None
        self._transformers: list[str] | None = None

    @property
    def body(self) -> ResponseBody | None:
        return self._body

    def with_text_body(self, text: str) -> Self:
        self._body = TextBody(text)
        return self

    def with_json_body(self, value: Any) -> Self:
        self._body = JsonBody(value)
        return self

    def with_referred_body(self, file_name: str) -> Self:
        """Serve the body from a file the server reads from its file store."""
        self._body = FileBody(file_name)
        return self

    def with_base64_body(self, data: str | bytes) -> Self:
        """Set a binary body. Bytes are encoded, strings are taken as already encoded."""
        if isinstance(data, bytes):
            data = base64.b64encode(data).decode("ascii")
        self._body = Base64Body(data)
        return self

    def with_detected_body(self, text: str | None) -> Self:
        """Set a JSON body if `text` parses as JSON, else a text body.

        Note that numeric or boolean strings such as "42" or "true" parse as
        JSON. Prefer with_json_body / with_text_body when the kind is known.
        None clears the body.
        """
        if text is None:
            self._body = None
            return self
        try:
            self._body = JsonBody(json.loads(text))
        except json.JSONDecodeError:
            self._body = TextBody(text)
        return self

    def with_header(self, name: str, value: str) -> Self:
        self._headers[name] = value
        return self

    def with_proxy_header(self, name: str, value: str | None) -> Self:
        """Add a header to requests forwarded to the proxy target."""
        self._proxy_headers[name] = value
        return self

    def with_delay(self, fixed_delay_ms: int) -> Self:
        self._fixed_delay_ms = fixed_delay_ms
        return self

    def with_delay_distribution(self, distribution: DelayDistribution) -> Self:
        self._delay_distribution = distribution
        return self

    def with_uniform_delay(self, lower_ms: int, upper_ms: int) -> Self:
        return self.with_delay_distribution(DelayDistribution(type="uniform", lower=lower_ms, upper=upper_ms))

    def with_lognormal_delay(self, median_ms: float, sigma: float) -> Self:
        return self.with_delay_distribution(DelayDistribution(type="lognormal", median=median_ms, sigma=sigma))

    def with_proxy(self, proxy_base_url: str) -> Self:
        self._proxy_base_url = proxy_base_url
        return self

    def with_fault(self, fault: Fault) -> Self:
        self._fault = fault
        return self

    def with_transformers(self, transformers: list[str]) -> Self:
        self._transformers = list(transformers)
        return self

    def with_response_template_transformer(self) -> Self:
        """Enable response templating (server must run with --local-response-templating)."""
        return self.with_transformers(["response-template"])

    def build(self) -> dict[str, Any]:
        document: dict[str, Any] = {}
        if self._status is not None:
            document["status"] = self._status
        if self._status_message is not None:
            document["statusMessage"] = self._status_message
        if self._body is not None:
            document[self._body.field_name] = self._body.wire_value()
        if self._headers:
            document["headers"] = dict(self._headers)
        if self._fixed_delay_ms is not None:
            document["fixedDelayMilliseconds"] = self._fixed_delay_ms
        if self._delay_distribution is not None:
            document["delayDistribution"] = self._delay_distribution.to_document()
        if self._proxy_base_url is not None:
            document["proxyBaseUrl"] = self._proxy_base_url
        if self._proxy_headers:
            document["additionalProxyRequestHeaders"] = dict(self._proxy_headers)
        if self._fault is not None:
            document["fault"] = int(self._fault)
        if self._transformers is not None:
            document["transformers"] = list(self._transformers)
        return document


# =============================================================================
# Factories
# =============================================================================


def response_for(status: int, status_message: str, body: str | None = None) -> ResponseDefinitionBuilder:
    """Response with the given status line and an optional text body."""
    builder = ResponseDefinitionBuilder(status, status_message)
    if body is not None:
        builder.with_text_body(body)
    return builder


def for_ok_response(body: str | None = None) -> ResponseDefinitionBuilder:
    return response_for(200, "Ok", body)


def for_not_found_response() -> ResponseDefinitionBuilder:
    return response_for(404, "Not Found")


def for_error_response(body: str | None = None) -> ResponseDefinitionBuilder:
    return response_for(500, "Internal Server Error", body)


def for_connection_reset_by_peer_fault() -> dict[str, Any]:
    return _fault_response(Fault.CONNECTION_RESET_BY_PEER)


def for_empty_response_fault() -> dict[str, Any]:
    return _fault_response(Fault.EMPTY_RESPONSE)


def for_malformed_response_chunk_fault() -> dict[str, Any]:
    return _fault_response(Fault.MALFORMED_RESPONSE_CHUNK)


def for_random_data_then_close_fault() -> dict[str, Any]:
    return _fault_response(Fault.RANDOM_DATA_THEN_CLOSE)


def _fault_response(fault: Fault) -> dict[str, Any]:
    # Fault responses carry no status line.
    return ResponseDefinitionBuilder().with_fault(fault).build()
