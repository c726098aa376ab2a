from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from inventory_export.config import AppConfig
from inventory_export.errors import (
    AccessError,
    EmptyResultError,
    NotFoundError,
    UpstreamError,
    UpstreamGoneError,
)
from inventory_export.http import http_get, read_json

logger = logging.getLogger(__name__)

COMMUNITY_INVENTORY_URL = "https://steamcommunity.com/inventory/{steam_id}/{app_id}/2"
ECON_PLAYER_ITEMS_URL = "https://api.steampowered.com/IEconItems_{app_id}/GetPlayerItems/v1/"

# GetPlayerItems result.status
LEGACY_STATUS_OK = 1
LEGACY_STATUS_INVALID_STEAM_ID = 8
LEGACY_STATUS_PRIVATE = 15

ACCESS_DENIED_STATUSES = (400, 401, 403)

LEGACY_STATUS_LABELS = {
    LEGACY_STATUS_INVALID_STEAM_ID: "invalid steamid",
    LEGACY_STATUS_PRIVATE: "private profile",
}


@dataclass(frozen=True)
class RawHolding:
    class_key: str
    instance_key: str
    amount: Any
    # variant-specific columns, in output order
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.class_key}_{self.instance_key}"


@dataclass(frozen=True)
class ItemDescription:
    class_key: str
    instance_key: str
    name: Optional[str] = None
    type: Optional[str] = None
    tradable: bool = False
    marketable: bool = False

    @property
    def key(self) -> str:
        return f"{self.class_key}_{self.instance_key}"


@dataclass
class InventoryContents:
    holdings: List[RawHolding]
    # None when the backend has no separate description set
    descriptions: Optional[List[ItemDescription]]
    file_prefix: str


def _as_key(value: Any) -> str:
    return "" if value is None else str(value)


def _as_flag(value: Any) -> bool:
    # community inventory sends 0/1, older dumps send booleans
    if isinstance(value, str):
        return value.strip() not in ("", "0", "false", "False")
    return bool(value)


class InventorySource(ABC):
    """One inventory backend. ``fetch`` returns normalized contents or raises an export error."""

    name = ""
    file_prefix = ""

    def __init__(self, config: AppConfig, session: requests.Session):
        self.config = config
        self.session = session

    @abstractmethod
    def fetch(self, steam_id: str) -> InventoryContents:
        raise NotImplementedError

    def _check_status(self, response: requests.Response, steam_id: str) -> None:
        status = response.status_code
        if status < 400:
            return
        logger.warning("%s backend returned HTTP %s for %s", self.name, status, steam_id)
        if status in ACCESS_DENIED_STATUSES:
            raise AccessError()
        if status == 404:
            raise NotFoundError()
        raise UpstreamError()


class SnapshotInventorySource(InventorySource):
    """steamcommunity.com/inventory: parallel ``assets`` and ``descriptions`` in one page."""

    name = "snapshot"
    file_prefix = "cs2_inventory"

    def fetch(self, steam_id: str) -> InventoryContents:
        url = COMMUNITY_INVENTORY_URL.format(steam_id=steam_id, app_id=self.config.app_id)
        params = {"l": self.config.inventory_language, "count": self.config.inventory_page_size}
        r = http_get(self.session, url, params=params, timeout=self.config.request_timeout_s)
        self._check_status(r, steam_id)
        data = read_json(r)

        if not isinstance(data, dict):
            raise NotFoundError()
        assets = data.get("assets")
        descriptions = data.get("descriptions")
        if assets is None and data.get("total_inventory_count") == 0:
            raise EmptyResultError()
        if not isinstance(assets, list) or not isinstance(descriptions, list):
            raise NotFoundError()
        if not assets:
            raise EmptyResultError()

        holdings = [
            RawHolding(
                class_key=_as_key(a.get("classid")),
                instance_key=_as_key(a.get("instanceid")),
                amount=a.get("amount"),
                fields={"Asset ID": a.get("assetid")},
            )
            for a in assets
            if isinstance(a, dict)
        ]
        described = [
            ItemDescription(
                class_key=_as_key(d.get("classid")),
                instance_key=_as_key(d.get("instanceid")),
                name=d.get("market_hash_name") or d.get("name"),
                type=d.get("type"),
                tradable=_as_flag(d.get("tradable")),
                marketable=_as_flag(d.get("marketable")),
            )
            for d in descriptions
            if isinstance(d, dict)
        ]
        logger.info("Fetched %d assets and %d descriptions for %s", len(holdings), len(described), steam_id)
        return InventoryContents(holdings=holdings, descriptions=described, file_prefix=self.file_prefix)


class LegacyInventorySource(InventorySource):
    """IEconItems GetPlayerItems: ``result.status`` plus economy-only ``items``."""

    name = "legacy"
    file_prefix = "cs2_items"

    def _check_status(self, response: requests.Response, steam_id: str) -> None:
        if response.status_code == 410:
            logger.warning("legacy backend returned HTTP 410 for %s", steam_id)
            raise UpstreamGoneError()
        super()._check_status(response, steam_id)

    def fetch(self, steam_id: str) -> InventoryContents:
        url = ECON_PLAYER_ITEMS_URL.format(app_id=self.config.app_id)
        params = {"key": self.config.steam_api_key, "steamid": steam_id}
        r = http_get(self.session, url, params=params, timeout=self.config.request_timeout_s)
        self._check_status(r, steam_id)
        data = read_json(r)

        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            raise NotFoundError()
        status = result.get("status")
        if status != LEGACY_STATUS_OK:
            logger.info(
                "GetPlayerItems status %s (%s) for %s",
                status,
                LEGACY_STATUS_LABELS.get(status, "unknown"),
                steam_id,
            )
            raise AccessError()
        items = result.get("items")
        if not isinstance(items, list):
            raise NotFoundError()
        if not items:
            raise EmptyResultError()

        holdings = [
            RawHolding(
                class_key=_as_key(it.get("defindex")),
                instance_key=_as_key(it.get("quality")),
                amount=it.get("quantity"),
                fields={
                    "Item ID": it.get("id"),
                    "Original ID": it.get("original_id"),
                    "Level": it.get("level"),
                    "Inventory Position": it.get("inventory"),
                },
            )
            for it in items
            if isinstance(it, dict)
        ]
        logger.info("Fetched %d legacy items for %s", len(holdings), steam_id)
        return InventoryContents(holdings=holdings, descriptions=None, file_prefix=self.file_prefix)


INVENTORY_SOURCES = {
    SnapshotInventorySource.name: SnapshotInventorySource,
    LegacyInventorySource.name: LegacyInventorySource,
}


def build_inventory_source(config: AppConfig, session: requests.Session) -> InventorySource:
    return INVENTORY_SOURCES[config.inventory_backend](config, session)
