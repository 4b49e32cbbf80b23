"""Admin Client - talks to the Wiremock admin REST API.

Every operation is one HTTP call (or a short fixed sequence of calls)
against a path under /__admin. Request bodies are JSON except for file
uploads. Reply bodies are parsed as JSON when possible and returned as
text otherwise.

See DESIGN.md "Admin Client" for the call ordering around body files.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from wiremock_helper.config_loader import ConfigError, load_mapping_file
from wiremock_helper.models import (
    AdminError,
    AdminErrorResponse,
    ClientConfig,
    ListStubMappingResults,
    StubMapping,
)


DEFAULT_BASE_URL = "http://localhost:8080"
ADMIN_PREFIX = "/__admin"


class WiremockError(Exception):
    """Base class for admin client errors."""


class AdminTransportError(WiremockError):
    """Raised when the HTTP call itself fails (connection refused, timeout, etc.)."""


class AdminResponseError(WiremockError):
    """Raised when the admin API replies with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(message or f"Wiremock didn't return 2xx code\nStatus: {status_code} - {reason}")


class AdminValidationError(AdminResponseError):
    """Raised on 422: the server rejected the structure of the submitted document."""

    def __init__(self, status_code: int, reason: str, body: str, errors: list[AdminError]) -> None:
        self.errors = errors
        details = "\n".join(
            f"{error.title}: {error.detail}" if error.detail else error.title for error in errors
        )
        super().__init__(
            status_code,
            reason,
            body,
            f"Wiremock rejected the request\nStatus: {status_code} - {reason}\n{details}",
        )


class MappingNotFoundError(WiremockError):
    """Raised when no stub mapping matches a metadata query."""


class BodyFileNotFoundError(WiremockError):
    """Raised when a referenced body file cannot be found locally."""


class WiremockClient:
    """Async client for the Wiremock admin API.

    Usage:
        async with WiremockClient("http://localhost:8080") as client:
            created = await client.add_mapping(stub_for(request, response))
            await client.delete_mapping(created["id"])

    The client holds no state besides its httpx client and configuration,
    so independent calls may run concurrently.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        files_root: Path | str | None = None,
        logger: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Scheme, host and port of the Wiremock server.
            files_root: Directory used to resolve body file references that
                        are not found at their literal path.
            logger: structlog logger; defaults to this module's logger.
            transport: httpx transport override (tests use httpx.MockTransport).
        """
        self._base_url = base_url
        self._files_root = Path(files_root) if files_root is not None else None
        self._log = logger if logger is not None else structlog.get_logger(__name__)
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        logger: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> WiremockClient:
        return cls(config.base_url, config.files_root, logger=logger, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> WiremockClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def perform_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        raw: bool = False,
    ) -> Any:
        """Send one admin request and decode the reply.

        Args:
            method: HTTP method.
            path: Path relative to /__admin, e.g. "/mappings".
            body: Document to JSON-encode, or text/bytes when raw is True.
            raw: Send body as-is instead of JSON-encoding it.

        Returns:
            The reply parsed as JSON, or its text if it is not JSON
            (empty replies come back as "").

        Raises:
            AdminTransportError: If the request could not be sent.
            AdminValidationError: On a 422 reply with an `errors` array.
            AdminResponseError: On any other non-2xx reply.
        """
        content: bytes | None = None
        headers: dict[str, str] = {}
        if body is not None:
            if raw:
                content = body.encode("utf-8") if isinstance(body, str) else body
            else:
                content = json.dumps(body).encode("utf-8")
                headers["Content-Type"] = "application/json"

        try:
            response = await self._client.request(
                method,
                ADMIN_PREFIX + path,
                content=content,
                headers=headers or None,
            )
        except httpx.RequestError as e:
            raise AdminTransportError(f"HTTP call to Wiremock failed!\n{e}") from e

        if not response.is_success:
            raise _response_error(response)
        return _decode_reply(response.text)

    # =========================================================================
    # Scenarios
    # =========================================================================

    async def get_scenarios(self) -> Any:
        return await self.perform_request("GET", "/scenarios")

    async def reset_scenarios(self) -> Any:
        """Move every scenario back to its Started state."""
        return await self.perform_request("POST", "/scenarios/reset")

    # =========================================================================
    # Stub Mappings
    # =========================================================================

    async def add_mapping(self, mapping: dict[str, Any] | StubMapping) -> Any:
        """Create a stub mapping.

        If the response refers to a body file, the file is uploaded first so
        the server never holds a mapping pointing at a missing file.

        Raises:
            BodyFileNotFoundError: If the referenced file is not found locally.
                                   Nothing is sent in that case.
        """
        document = _mapping_document(mapping)
        file_name = _referenced_body_file(document)
        if file_name is not None:
            file_path = self._resolve_body_file(file_name)
            await self.upload_file(file_name, file_path.read_bytes())
        return await self.perform_request("POST", "/mappings", document)

    async def add_mappings_from_dir(self, directory: Path | str) -> list[Any]:
        """Add every *.json mapping file found in `directory`.

        Files are submitted concurrently. A file that cannot be loaded or is
        rejected by the server is logged and skipped.

        Returns:
            The server replies for the mappings that were created.

        Raises:
            ConfigError: If `directory` is not an existing directory.
        """
        if not Path(directory).is_dir():
            raise ConfigError(f"Mapping directory not found: {directory}")
        paths = sorted(Path(directory).glob("*.json"))
        results = await asyncio.gather(
            *(self._add_mapping_file(path) for path in paths),
            return_exceptions=True,
        )

        created: list[Any] = []
        for path, result in zip(paths, results):
            if isinstance(result, Exception):
                self._log.warning("mapping_file_rejected", path=str(path), error=str(result))
            elif isinstance(result, BaseException):
                raise result
            else:
                created.append(result)
        return created

    async def _add_mapping_file(self, path: Path) -> Any:
        return await self.add_mapping(load_mapping_file(path))

    async def get_mappings(self) -> Any:
        return await self.perform_request("GET", "/mappings")

    async def get_mapping(self, mapping_id: str) -> Any:
        return await self.perform_request("GET", _mapping_path(mapping_id))

    async def find_by_metadata(self, metadata: dict[str, Any]) -> Any:
        return await self.perform_request("POST", "/mappings/find-by-metadata", metadata)

    async def update_mapping(self, mapping_id: str, mapping: dict[str, Any] | StubMapping) -> Any:
        return await self.perform_request("PUT", _mapping_path(mapping_id), _mapping_document(mapping))

    async def update_mapping_by_metadata(
        self,
        metadata: dict[str, Any],
        mapping: dict[str, Any] | StubMapping,
    ) -> Any:
        """Replace the mapping found by a metadata query.

        The new mapping must carry the metadata again to be found by the same
        query later. When several mappings match, the first one is updated.

        Raises:
            MappingNotFoundError: If no mapping matches.
        """
        reply = await self.find_by_metadata(metadata)
        try:
            found = ListStubMappingResults.model_validate(reply)
        except ValidationError as e:
            raise WiremockError(f"Unexpected find-by-metadata reply: {e}") from e

        if found.meta.total == 0 or not found.mappings or found.mappings[0].id is None:
            self._log.error("mapping_update_no_match", metadata=metadata)
            raise MappingNotFoundError(f"No stub mappings found to update for metadata: {metadata}")
        if found.meta.total > 1:
            self._log.warning("mapping_update_ambiguous", metadata=metadata, total=found.meta.total)

        return await self.update_mapping(found.mappings[0].id, mapping)

    async def delete_mapping(self, mapping_id: str) -> Any:
        """Delete a mapping and the body file it refers to, file first.

        The two deletes are not atomic: if the second call fails the mapping
        stays in place while its body file is already gone.
        """
        existing = await self.get_mapping(mapping_id)
        file_name = _referenced_body_file(existing)
        if file_name is not None:
            await self.delete_file(file_name)
        return await self.perform_request("DELETE", _mapping_path(mapping_id))

    async def delete_all_mappings(self) -> None:
        """Delete all body files, all mappings, then reset the request journal."""
        await self.delete_all_files()
        await self.perform_request("DELETE", _mapping_path(""))
        await self.reset_request_journal()

    async def remove_by_metadata(self, metadata: dict[str, Any]) -> Any:
        return await self.perform_request("POST", "/mappings/remove-by-metadata", metadata)

    # =========================================================================
    # Request Journal
    # =========================================================================

    async def get_request_journal(self) -> Any:
        return await self.perform_request("GET", "/requests")

    async def reset_request_journal(self) -> Any:
        return await self.perform_request("DELETE", "/requests")

    async def get_request_count(self, query: dict[str, Any]) -> Any:
        """Count journal entries matching a request pattern. Replies {"count": n}."""
        return await self.perform_request("POST", "/requests/count", query)

    async def find_requests(self, query: dict[str, Any]) -> Any:
        return await self.perform_request("POST", "/requests/find", query)

    # =========================================================================
    # Body Files
    # =========================================================================

    async def upload_file(self, name: str, content: str | bytes) -> Any:
        return await self.perform_request("PUT", _file_path(name), content, raw=True)

    async def get_files(self) -> Any:
        return await self.perform_request("GET", "/files")

    async def delete_file(self, name: str) -> Any:
        return await self.perform_request("DELETE", _file_path(name))

    async def delete_all_files(self) -> None:
        """Delete every file in the server's file store.

        Deletes run concurrently; a failed delete is logged and does not stop
        the others.
        """
        listing = await self.get_files()
        names = [name for name in listing if isinstance(name, str)] if isinstance(listing, list) else []
        results = await asyncio.gather(
            *(self.delete_file(name) for name in names),
            return_exceptions=True,
        )
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                self._log.warning("file_delete_failed", file=name, error=str(result))
            elif isinstance(result, BaseException):
                raise result

    def _resolve_body_file(self, file_name: str) -> Path:
        # Literal path first, then relative to the configured files root.
        candidates = [Path(file_name)]
        if self._files_root is not None:
            candidates.append(self._files_root / file_name)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        tried = ", ".join(str(candidate) for candidate in candidates)
        raise BodyFileNotFoundError(f"Body file '{file_name}' not found (tried: {tried})")


def _mapping_path(mapping_id: str) -> str:
    # An empty id addresses the whole collection.
    return f"/mappings/{mapping_id}" if mapping_id else "/mappings"


def _file_path(name: str) -> str:
    return f"/files/{quote(name, safe='/')}"


def _mapping_document(mapping: dict[str, Any] | StubMapping) -> dict[str, Any]:
    if isinstance(mapping, StubMapping):
        return mapping.to_document()
    return mapping


def _referenced_body_file(mapping: Any) -> str | None:
    if not isinstance(mapping, dict):
        return None
    response = mapping.get("response")
    if not isinstance(response, dict):
        return None
    file_name = response.get("bodyFileName")
    return file_name if isinstance(file_name, str) and file_name else None


def _decode_reply(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _response_error(response: httpx.Response) -> AdminResponseError:
    if response.status_code == 422:
        try:
            parsed = AdminErrorResponse.model_validate_json(response.text)
        except ValidationError:
            parsed = None
        if parsed is not None and parsed.errors:
            return AdminValidationError(
                response.status_code, response.reason_phrase, response.text, parsed.errors
            )
    return AdminResponseError(response.status_code, response.reason_phrase, response.text)
