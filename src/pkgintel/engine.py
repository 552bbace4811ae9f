"""Query engine: dispatches to registry adapters and wraps results."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

import httpx

from pkgintel.adapters.base import BaseAdapter, validate_name
from pkgintel.adapters.crates import CratesAdapter
from pkgintel.adapters.npm import NpmAdapter
from pkgintel.adapters.pypi import PyPiAdapter
from pkgintel.analyzers.scorer import MaintenanceScorer
from pkgintel.analyzers.timeline import assemble_timeline
from pkgintel.client import RegistryClient
from pkgintel.config import EngineConfig
from pkgintel.errors import InvalidInputError, RegistryError
from pkgintel.models.envelope import (
    ErrorResponse,
    SuccessResponse,
    error_response,
    error_response_from_exception,
    success_response,
)
from pkgintel.models.schemas import (
    Ecosystem,
    ErrorCode,
    MaintenanceSignals,
    PackageSummary,
    ReleaseTimeline,
)

logger = logging.getLogger(__name__)

# The ecosystem set is closed; one adapter per ecosystem
ECOSYSTEM_ADAPTERS: dict[Ecosystem, type[BaseAdapter]] = {
    Ecosystem.NPM: NpmAdapter,
    Ecosystem.PYPI: PyPiAdapter,
    Ecosystem.CRATES: CratesAdapter,
}


class RegistryEngine:
    """Answers summary, timeline and maintenance queries for one package.

    Every query makes exactly one registry request and always returns an
    envelope; failures are never raised to the caller.

    Usage:
        engine = RegistryEngine(load_settings().engine_config())
        result = await engine.maintenance_signals("pypi", "requests")
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        client: httpx.AsyncClient | None = None,
        scorer: MaintenanceScorer | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Timeout, user agent and base URLs. Defaults to the
                    public registries with a 30 second timeout.
            client: Optional shared httpx client for outbound requests.
            scorer: Maintenance scorer; defaults to MaintenanceScorer().
        """
        self.config = config or EngineConfig()
        self.registry_client = RegistryClient(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout,
            client=client,
        )
        self.scorer = scorer or MaintenanceScorer()

    def get_adapter(self, ecosystem: Ecosystem | str) -> BaseAdapter:
        """Get the adapter for an ecosystem tag.

        Raises:
            InvalidInputError: If the ecosystem is not supported.
        """
        try:
            resolved = Ecosystem.parse(ecosystem)
        except ValueError as e:
            raise InvalidInputError(
                str(e),
                {"provided": ecosystem, "supported": [m.value for m in Ecosystem]},
            ) from e
        adapter_class = ECOSYSTEM_ADAPTERS[resolved]
        return adapter_class(self.registry_client, self.config.base_url(resolved))

    async def package_summary(
        self, ecosystem: Ecosystem | str, name: str
    ) -> SuccessResponse[PackageSummary] | ErrorResponse:
        """Get normalized summary information for a package."""

        async def query(adapter: BaseAdapter, name: str):
            data = await adapter.fetch_document(name)
            summary = adapter.normalize(name, adapter.parse_summary, name, data)
            return success_response(
                summary,
                source=adapter.package_url(name),
                warnings=adapter.warnings(data),
            )

        return await self._run("package_summary", ecosystem, name, query)

    async def release_timeline(
        self, ecosystem: Ecosystem | str, name: str, limit: Any = None
    ) -> SuccessResponse[ReleaseTimeline] | ErrorResponse:
        """Get the release history, newest first.

        Args:
            ecosystem: Ecosystem tag.
            name: Package name.
            limit: Maximum releases to return (default 20, max 100).
        """

        async def query(adapter: BaseAdapter, name: str):
            data = await adapter.fetch_document(name)
            entries = adapter.normalize(name, adapter.parse_timeline, data)
            package_name = adapter.normalize(name, adapter.package_name, name, data)
            assembled = assemble_timeline(package_name, adapter.ecosystem, entries, limit)
            return success_response(
                assembled.timeline,
                source=adapter.package_url(name),
                next_cursor=assembled.next_cursor,
                warnings=adapter.warnings(data),
            )

        return await self._run("release_timeline", ecosystem, name, query)

    async def maintenance_signals(
        self,
        ecosystem: Ecosystem | str,
        name: str,
        now: datetime | None = None,
    ) -> SuccessResponse[MaintenanceSignals] | ErrorResponse:
        """Score maintenance health from release metadata.

        Args:
            ecosystem: Ecosystem tag.
            name: Package name.
            now: Reference time for recency. Defaults to the current UTC time.
        """

        async def query(adapter: BaseAdapter, name: str):
            data = await adapter.fetch_document(name)
            entries = adapter.normalize(name, adapter.parse_timeline, data)
            deprecation = adapter.normalize(name, adapter.parse_deprecation, data)
            package_name = adapter.normalize(name, adapter.package_name, name, data)
            signals = self.scorer.score(
                package_name,
                adapter.ecosystem,
                entries,
                deprecation,
                now=now,
            )
            return success_response(
                signals,
                source=adapter.package_url(name),
                warnings=adapter.warnings(data),
            )

        return await self._run("maintenance_signals", ecosystem, name, query)

    async def _run(
        self,
        operation: str,
        ecosystem: Ecosystem | str,
        name: Any,
        query: Callable[[BaseAdapter, str], Awaitable[SuccessResponse]],
    ) -> SuccessResponse | ErrorResponse:
        """Resolve inputs, run ``query`` and convert failures to envelopes."""
        try:
            adapter = self.get_adapter(ecosystem)
            name = validate_name(name, adapter.ecosystem)
            logger.debug(f"{operation}: {adapter.ecosystem.value}/{name}")
            return await query(adapter, name)
        except RegistryError as e:
            # Input failures raised before an adapter exists still echo the query
            e.details.setdefault("package", name)
            e.details.setdefault("ecosystem", getattr(ecosystem, "value", ecosystem))
            logger.info(f"{operation} failed with {e.code.value}: {e.message}")
            return error_response_from_exception(e)
        except Exception as e:
            logger.exception(f"{operation} raised unexpectedly for {ecosystem}/{name}")
            return error_response(
                ErrorCode.INTERNAL_ERROR,
                f"{operation} failed: {e}",
                {
                    "operation": operation,
                    "package": name,
                    "ecosystem": getattr(ecosystem, "value", ecosystem),
                },
            )
