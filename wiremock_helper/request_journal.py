"""Request-Journal Helper - journal queries scoped to one browser.

Wraps anything that can send admin requests (normally a WiremockClient)
and adds a User-Agent condition to every journal query when a browser
name is configured.
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog

from wiremock_helper.matchers import contains


class RequestSender(Protocol):
    """The admin request capability the helper needs."""

    async def perform_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        raw: bool = False,
    ) -> Any: ...


class RequestJournalHelper:
    """Query the request journal, optionally filtered by browser.

    Usage:
        async with WiremockClient() as client:
            journal = RequestJournalHelper(client, browser_name="firefox")
            count = await journal.get_request_count(
                for_get_request_matching_url("/items").build()
            )
    """

    def __init__(self, sender: RequestSender, browser_name: str | None = None, logger: Any = None) -> None:
        """Initialize the helper.

        Args:
            sender: Object issuing the admin requests.
            browser_name: Browser name matched against User-Agent. Title-cased
                          ("FIREFOX" -> "Firefox"). Empty or None disables
                          the header condition.
            logger: structlog logger; defaults to this module's logger.
        """
        self._sender = sender
        self._browser_name = browser_name.capitalize() if browser_name else None
        self._log = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def browser_name(self) -> str | None:
        return self._browser_name

    def with_browser_header(self, query: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of `query` with the User-Agent condition merged into its headers."""
        if not self._browser_name:
            return dict(query)
        headers = dict(query.get("headers") or {})
        headers["User-Agent"] = contains(self._browser_name).to_document()
        return {**query, "headers": headers}

    async def get_request_journal(self) -> Any:
        return await self._sender.perform_request("GET", "/requests")

    async def reset_request_journal(self) -> Any:
        return await self._sender.perform_request("DELETE", "/requests")

    async def get_request_count(self, query: dict[str, Any]) -> int:
        """Count matching journal entries.

        Any failure, including an unreachable server, is logged and counted
        as zero so verification call sites can assert on the number alone.
        """
        try:
            reply = await self._sender.perform_request(
                "POST", "/requests/count", self.with_browser_header(query)
            )
        except Exception as e:
            self._log.warning("request_count_failed", error=str(e))
            return 0

        count = reply.get("count") if isinstance(reply, dict) else None
        if not isinstance(count, int):
            self._log.warning("request_count_unreadable", reply=reply)
            return 0
        return count

    async def find_requests(self, query: dict[str, Any]) -> Any:
        """Return the journal entries matching `query` ({"requests": [...]})."""
        return await self._sender.perform_request(
            "POST", "/requests/find", self.with_browser_header(query)
        )
