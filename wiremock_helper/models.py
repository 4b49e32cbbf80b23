"""Wire models for the Wiremock admin API.

All models use Pydantic v2 with camelCase aliases so they read and write
the admin API's JSON directly. Builders produce plain dicts; these models
are used to read documents back (mapping files, admin replies) and to
carry client configuration.
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class WireModel(BaseModel):
    """Base for admin API documents."""

    model_config = _WIRE_CONFIG

    def to_document(self) -> dict[str, Any]:
        """Dump using wire names, leaving out unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Response Definition Models
# =============================================================================


class Fault(IntEnum):
    """Canned connection faults, serialized by ordinal."""

    CONNECTION_RESET_BY_PEER = 0
    EMPTY_RESPONSE = 1
    MALFORMED_RESPONSE_CHUNK = 2
    RANDOM_DATA_THEN_CLOSE = 3


class DelayDistribution(WireModel):
    """Random delay. `uniform` uses lower/upper, `lognormal` uses median/sigma."""

    type: str
    median: float | None = None
    sigma: float | None = None
    upper: int | None = None
    lower: int | None = None


class ResponseDefinition(WireModel):
    status: int | None = None
    status_message: str | None = None
    body: str | None = None
    json_body: Any = None
    body_file_name: str | None = None
    base64_body: str | None = None
    headers: dict[str, Any] | None = None
    additional_proxy_request_headers: dict[str, Any] | None = None
    fixed_delay_milliseconds: int | None = None
    delay_distribution: DelayDistribution | None = None
    fault: Fault | None = None
    proxy_base_url: str | None = None
    transformers: list[str] | None = None
    transformer_parameters: dict[str, Any] | None = None

    @field_validator("fault", mode="before")
    @classmethod
    def accept_fault_name(cls, value: Any) -> Any:
        # Mapping files and admin replies name the fault; builders send the ordinal.
        if isinstance(value, str) and value in Fault.__members__:
            return Fault[value]
        return value

    @model_validator(mode="after")
    def check_body_exclusivity(self) -> Self:
        present = [
            name
            for name, value in (
                ("body", self.body),
                ("jsonBody", self.json_body),
                ("bodyFileName", self.body_file_name),
                ("base64Body", self.base64_body),
            )
            if value is not None
        ]
        if len(present) > 1:
            raise ValueError(f"response body fields are mutually exclusive, got {', '.join(present)}")
        return self


# =============================================================================
# Request Pattern Models
# =============================================================================


class BasicCredentials(WireModel):
    username: str
    password: str


class RequestPattern(WireModel):
    method: str | None = None
    url: str | None = None
    url_pattern: str | None = None
    url_path: str | None = None
    url_path_pattern: str | None = None
    headers: dict[str, Any] | None = None
    query_parameters: dict[str, Any] | None = None
    cookies: dict[str, Any] | None = None
    body_patterns: list[Any] | None = None
    basic_auth_credentials: BasicCredentials | None = None

    @model_validator(mode="after")
    def check_single_url_field(self) -> Self:
        present = [
            name
            for name, value in (
                ("url", self.url),
                ("urlPattern", self.url_pattern),
                ("urlPath", self.url_path),
                ("urlPathPattern", self.url_path_pattern),
            )
            if value is not None
        ]
        if len(present) > 1:
            raise ValueError(f"URL fields are mutually exclusive, got {', '.join(present)}")
        return self


# =============================================================================
# Stub Mapping Models
# =============================================================================


class StubMapping(WireModel):
    """A request pattern paired with a response definition.

    The server assigns `id` (and `uuid`) on creation.
    """

    id: str | None = None
    uuid: str | None = None
    name: str | None = None
    priority: int | None = None
    persistent: bool | None = None
    scenario_name: str | None = None
    required_scenario_state: str | None = None
    new_scenario_state: str | None = None
    post_serve_actions: Any = None
    metadata: dict[str, Any] | None = None
    request: RequestPattern
    response: ResponseDefinition


class ListMeta(WireModel):
    total: int


class ListStubMappingResults(WireModel):
    mappings: list[StubMapping] = Field(default_factory=list)
    meta: ListMeta


class Scenario(WireModel):
    id: str | None = None
    name: str
    state: str | None = None
    possible_states: list[str] = Field(default_factory=list)


class ScenarioList(WireModel):
    scenarios: list[Scenario] = Field(default_factory=list)


# =============================================================================
# Admin Error Models
# =============================================================================


class ErrorSource(WireModel):
    pointer: str | None = None


class AdminError(WireModel):
    """One entry of a 422 reply's `errors` array."""

    code: int | None = None
    source: ErrorSource | None = None
    title: str
    detail: str | None = None


class AdminErrorResponse(WireModel):
    errors: list[AdminError] = Field(default_factory=list)


# =============================================================================
# Configuration Models
# =============================================================================


class ClientConfig(BaseModel):
    """Client configuration file structure."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(default="http://localhost:8080", description="Wiremock base URL")
    files_root: Path | None = Field(
        default=None, description="Directory used to resolve relative body file references"
    )
    browser_name: str | None = Field(
        default=None, description="Browser name injected as a User-Agent condition into journal queries"
    )
