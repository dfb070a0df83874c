# ============================================================================
# BACKEND HTTP CLIENT
# ============================================================================
# STATUS: Infrastructure - Async HTTP client for the asset backend
# PURPOSE: Load and persist assets; consumables/panchayat lookups
# CREATED: 19 OCT 2026
# ============================================================================
"""
Backend HTTP Client

Async httpx client for the REST backend that owns persistence:

    GET    /assets              list asset records
    POST   /assets              create
    PUT    /assets/{id}         full replace
    DELETE /assets/{id}
    GET    /consumables         (consumables page records)
    POST   /consumables
    DELETE /consumables/{id}
    GET    /panchayats/{id}

Every failure (unreachable, timeout, non-2xx, unreadable body) raises
NetworkError; the page boundary turns it into a dismissible banner.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional

import httpx

from core.config import BackendDefaults
from core.errors import NetworkError, ValidationError
from core.logging import ComponentType, get_logger
from core.models.asset import Asset
from core.models.consumable import Consumable, Panchayat

logger = get_logger(__name__, ComponentType.BACKEND)


class AssetBackendClient:
    """Async HTTP client for the asset backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        defaults = BackendDefaults()
        self._base_url = (base_url or defaults.base_url).rstrip("/")
        self._timeout = httpx.Timeout(timeout if timeout is not None else defaults.timeout_seconds)
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> Any:
        """
        Make one request and return the decoded JSON body (None if empty).

        Raises:
            NetworkError: connection failure, timeout, non-2xx, bad JSON.
        """
        url = f"{self._base_url}{path}"
        try:
            if client is None:
                async with self._client() as own_client:
                    resp = await own_client.request(method, path, json=json_body)
            else:
                resp = await client.request(method, path, json=json_body)
        except httpx.ConnectError as e:
            logger.error(f"Cannot reach backend at {url}: {e}")
            raise NetworkError(f"Backend unreachable: {e}") from e
        except httpx.TimeoutException as e:
            logger.error(f"Backend timeout: {method} {url}")
            raise NetworkError(f"Backend timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"Backend request failed: {method} {url}: {e}")
            raise NetworkError(f"Backend request failed: {e}") from e

        if resp.status_code >= 400:
            detail = resp.text[:200]
            logger.error(f"Backend error {resp.status_code}: {method} {path} -> {detail}")
            raise NetworkError(
                f"Backend returned {resp.status_code} for {method} {path}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(
                f"Backend returned invalid JSON for {method} {path}",
                status_code=resp.status_code,
            ) from e

    # ------------------------------------------------------------------
    # ASSETS
    # ------------------------------------------------------------------

    async def list_assets(self) -> List[Asset]:
        """
        GET /assets

        Records that fail validation are skipped with a warning so one
        bad row never keeps the map from loading.
        """
        body = await self._request("GET", "/assets")
        assets: List[Asset] = []
        for record in body or []:
            try:
                assets.append(Asset.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid asset record {record.get('id')!r}: {e.field_errors}")
        return assets

    async def create_asset(self, asset: Asset) -> Optional[Dict[str, Any]]:
        """POST /assets"""
        return await self._request("POST", "/assets", json_body=asset.to_record())

    async def update_asset(self, asset: Asset) -> Optional[Dict[str, Any]]:
        """PUT /assets/{id}"""
        return await self._request("PUT", f"/assets/{asset.id}", json_body=asset.to_record())

    async def delete_asset(self, asset_id: str) -> None:
        """DELETE /assets/{id}"""
        await self._request("DELETE", f"/assets/{asset_id}")

    # ------------------------------------------------------------------
    # CONSUMABLES
    # ------------------------------------------------------------------

    async def list_consumables(self) -> List[Consumable]:
        """GET /consumables"""
        body = await self._request("GET", "/consumables")
        return [Consumable.model_validate(record) for record in body or []]

    async def create_consumable(self, consumable: Consumable) -> Consumable:
        """POST /consumables (id assigned by the backend)."""
        body = await self._request(
            "POST",
            "/consumables",
            json_body=consumable.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Consumable.model_validate(body) if body else consumable

    async def delete_consumable(self, consumable_id: str) -> None:
        """DELETE /consumables/{id}"""
        await self._request("DELETE", f"/consumables/{consumable_id}")

    # ------------------------------------------------------------------
    # PANCHAYATS
    # ------------------------------------------------------------------

    async def get_panchayat(
        self, panchayat_id: str, client: Optional[httpx.AsyncClient] = None,
    ) -> Panchayat:
        """GET /panchayats/{id}"""
        body = await self._request("GET", f"/panchayats/{panchayat_id}", client=client)
        return Panchayat.model_validate(body)

    async def get_panchayat_names(self, panchayat_ids: Iterable[str]) -> Dict[str, str]:
        """
        Resolve panchayat names for a batch of ids.

        Ids are deduplicated (order kept) before the lookups are issued
        in parallel over one connection pool.
        """
        unique_ids = [pid for pid in dict.fromkeys(panchayat_ids) if pid]
        if not unique_ids:
            return {}

        async with self._client() as client:
            panchayats = await asyncio.gather(
                *(self.get_panchayat(pid, client=client) for pid in unique_ids)
            )
        return {p.id: p.name for p in panchayats}


__all__ = ["AssetBackendClient"]
