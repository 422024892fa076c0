"""Async indexer client that reads throws and harvests for one owner."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from edensync.adapters.http_resilience import ResilientClient
from edensync.config.indexer import IndexerConfig, get_indexer_config
from edensync.domain.errors import LedgerQueryError

from .schema import AssetsResponse, TransactionPayload, TransactionsResponse
from .translator import parse_harvest_transaction, parse_throw_transaction

if TYPE_CHECKING:
    from collections.abc import Callable

    from edensync.config.http_resilience import ResilienceConfig
    from edensync.domain.model import Harvest, Throw
    from edensync.domain.ports import HarvestQuery, ThrowQuery

log = getLogger(__name__)

ASSETS_PATH = "/v2/assets"
TRANSACTIONS_PATH = "/v2/transactions"
_MAX_PAGES = 50


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class IndexerLedger:
    """Reads confirmed throws and harvests from an Algorand-style indexer.

    ``query_throws`` and ``query_harvests`` satisfy the ``ThrowQuery`` and
    ``HarvestQuery`` ports. Transport, status and payload errors surface as
    ``LedgerQueryError``; a single unreadable asset is skipped instead.
    """

    config: IndexerConfig = field(default_factory=get_indexer_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def query_throws(self, owner_key: str) -> list[Throw]:
        try:
            async with self.client_factory(self.config.resilience) as client:
                asset_ids = await self._created_asset_ids(client, owner_key)
                throws: list[Throw] = []
                batch_size = max(1, self.config.asset_batch_size)
                for start in range(0, len(asset_ids), batch_size):
                    batch = asset_ids[start : start + batch_size]
                    results = await asyncio.gather(
                        *(self._throw_for_asset(client, asset_id) for asset_id in batch)
                    )
                    throws.extend(throw for throw in results if throw is not None)
        except (httpx.HTTPError, ValueError) as exc:
            raise LedgerQueryError(f"Indexer throw query for {owner_key} failed: {exc}") from exc

        log.debug("Indexer returned %s throw(s) for %s", len(throws), owner_key)
        return sorted(throws, key=lambda throw: throw.thrown_at, reverse=True)

    async def query_harvests(self, owner_key: str) -> list[Harvest]:
        params: dict[str, str | int] = {
            "address": owner_key,
            "address-role": "sender",
            "tx-type": "pay",
        }
        try:
            async with self.client_factory(self.config.resilience) as client:
                transactions = await self._paged_transactions(client, params)
        except (httpx.HTTPError, ValueError) as exc:
            raise LedgerQueryError(f"Indexer harvest query for {owner_key} failed: {exc}") from exc

        harvests: list[Harvest] = []
        for tx in transactions:
            harvest = parse_harvest_transaction(tx)
            if harvest is not None:
                harvests.append(harvest)
        return sorted(harvests, key=lambda harvest: harvest.harvested_at, reverse=True)

    async def _created_asset_ids(self, client: ResilientClient, owner_key: str) -> list[int]:
        asset_ids: list[int] = []
        params: dict[str, str | int] = {"creator": owner_key}
        for _page in range(_MAX_PAGES):
            response = await self._get(client, ASSETS_PATH, params, AssetsResponse)
            asset_ids.extend(asset.index for asset in response.assets if not asset.deleted)
            if not response.next_token or not response.assets:
                break
            params = {**params, "next": response.next_token}
        return asset_ids

    async def _throw_for_asset(self, client: ResilientClient, asset_id: int) -> Throw | None:
        params: dict[str, str | int] = {"asset-id": asset_id, "tx-type": "acfg"}
        try:
            response = await self._get(client, TRANSACTIONS_PATH, params, TransactionsResponse)
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            log.warning("Skipping asset %s, config transactions unreadable: %s", asset_id, exc)
            return None
        # indexer pages run oldest first; the latest reconfiguration wins
        for tx in reversed(response.transactions):
            throw = parse_throw_transaction(asset_id, tx)
            if throw is not None:
                return throw
        return None

    async def _paged_transactions(
        self,
        client: ResilientClient,
        params: dict[str, str | int],
    ) -> list[TransactionPayload]:
        transactions: list[TransactionPayload] = []
        query = dict(params)
        for _page in range(_MAX_PAGES):
            response = await self._get(client, TRANSACTIONS_PATH, query, TransactionsResponse)
            transactions.extend(response.transactions)
            if not response.next_token or not response.transactions:
                break
            query = {**query, "next": response.next_token}
        return transactions

    async def _get[M: BaseModel](
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str | int],
        model: type[M],
    ) -> M:
        response = await client.get(path, params=httpx.QueryParams(params))
        response.raise_for_status()
        return model.model_validate(response.json())


if TYPE_CHECKING:
    _throw_query_check: ThrowQuery = IndexerLedger().query_throws
    _harvest_query_check: HarvestQuery = IndexerLedger().query_harvests
