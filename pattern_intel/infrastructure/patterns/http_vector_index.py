"""
Adapter: HTTP vector index gateway.

Implements VectorIndexPort against a vector database exposed over HTTP:

    POST {base}/indexes/{namespace}/vectors   upsert
    POST {base}/indexes/{namespace}/search    nearest-neighbour search
    GET  {base}/health                        liveness probe

No retries are attempted here.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional
from urllib.parse import quote

import httpx

from pattern_intel.domain.patterns.entities import (
    IndexEntry,
    IndexHealth,
    IndexStatus,
    SearchHit,
)
from pattern_intel.domain.patterns.errors import VectorIndexUnavailableError
from pattern_intel.domain.patterns.ports import VectorIndexPort

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class HttpVectorIndexAdapter(VectorIndexPort):
    """Vector index client speaking JSON over HTTP.

    Args:
        base_url: Gateway root, e.g. "http://localhost:7700".
        api_key: Optional bearer token.
        tenant_id: Optional deployment-wide tenant sent as x-tenant-id.
        timeout: Request timeout in seconds.
        client: Shared AsyncClient. When omitted a client is opened per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        tenant_id: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._tenant_id = tenant_id
        self._timeout = timeout
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._tenant_id:
            headers["x-tenant-id"] = self._tenant_id
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _index_url(self, namespace: str, action: str) -> str:
        return f"{self._base_url}/indexes/{quote(namespace, safe='')}/{action}"

    async def upsert(self, entries: list[IndexEntry], namespace: str) -> None:
        """Write entries to the gateway.

        Raises:
            VectorIndexUnavailableError: If the gateway rejects the write
                or cannot be reached.
        """
        if not entries:
            return

        payload: dict[str, Any] = {
            "vectors": [
                {
                    "id": entry.id,
                    "vector": entry.vector,
                    "metadata": entry.metadata,
                    "namespace": entry.namespace,
                }
                for entry in entries
            ],
        }
        if self._tenant_id:
            payload["tenantId"] = self._tenant_id

        try:
            async with self._session() as client:
                resp = await client.post(
                    self._index_url(namespace, "vectors"),
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            logger.error("Upsert to namespace=%s failed: %s", namespace, exc)
            raise VectorIndexUnavailableError(str(exc)) from exc

        if resp.is_error:
            logger.error(
                "Upsert to namespace=%s rejected with HTTP %d",
                namespace,
                resp.status_code,
            )
            raise VectorIndexUnavailableError(
                f"upsert rejected with HTTP {resp.status_code}"
            )

        logger.debug("Upserted %d vectors into namespace=%s", len(entries), namespace)

    async def search(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[SearchHit]:
        """Query the gateway. A non-2xx answer yields no hits.

        Raises:
            VectorIndexUnavailableError: If the gateway cannot be reached.
        """
        payload: dict[str, Any] = {
            "vector": vector,
            "topK": top_k,
            "namespace": namespace,
            "filter": filter or {},
        }
        if self._tenant_id:
            payload["tenantId"] = self._tenant_id

        try:
            async with self._session() as client:
                resp = await client.post(
                    self._index_url(namespace, "search"),
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            logger.error("Search in namespace=%s failed: %s", namespace, exc)
            raise VectorIndexUnavailableError(str(exc)) from exc

        if resp.is_error:
            logger.warning(
                "Search in namespace=%s returned HTTP %d; treating as no matches",
                namespace,
                resp.status_code,
            )
            return []

        try:
            body = resp.json()
        except ValueError:
            logger.warning("Search in namespace=%s returned invalid JSON", namespace)
            return []

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            return []

        return [_to_hit(raw) for raw in results if isinstance(raw, dict)]

    async def ping(self) -> IndexHealth:
        start = time.monotonic()
        try:
            async with self._session() as client:
                resp = await client.get(
                    f"{self._base_url}/health", headers=self._headers()
                )
        except httpx.HTTPError as exc:
            logger.warning("Vector index health probe failed: %s", exc)
            return IndexHealth(status=IndexStatus.UNHEALTHY)

        latency_ms = round((time.monotonic() - start) * 1000, 2)
        if resp.is_error:
            return IndexHealth(status=IndexStatus.DEGRADED, latency_ms=latency_ms)

        try:
            body = resp.json()
        except ValueError:
            body = {}
        version = body.get("version") if isinstance(body, dict) else None

        return IndexHealth(
            status=IndexStatus.OK,
            version=version,
            latency_ms=latency_ms,
        )


def _to_hit(raw: dict[str, Any]) -> SearchHit:
    score = raw.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        score = 0.0
    metadata = raw.get("metadata")
    return SearchHit(
        id=str(raw.get("id")),
        score=float(score),
        metadata=metadata if isinstance(metadata, dict) else {},
    )
