import sys
import unittest
from pathlib import Path

import requests

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from helpers import fake_response, fake_session, make_config  # noqa: E402
from inventory_export.errors import (  # noqa: E402
    AccessError,
    EmptyResultError,
    NotFoundError,
    UpstreamError,
    UpstreamGoneError,
)
from inventory_export.sources import (  # noqa: E402
    LegacyInventorySource,
    SnapshotInventorySource,
    build_inventory_source,
)

STEAM_ID = "76561197960287930"

SNAPSHOT_BODY = {
    "assets": [
        {"appid": 730, "contextid": "2", "assetid": "1001", "classid": "310776", "instanceid": "302028390", "amount": "1"},
        {"appid": 730, "contextid": "2", "assetid": "1002", "classid": "999", "instanceid": "0", "amount": "1"},
    ],
    "descriptions": [
        {
            "classid": "310776",
            "instanceid": "302028390",
            "name": "AWP | Asiimov",
            "market_hash_name": "AWP | Asiimov (Field-Tested)",
            "type": "Covert Sniper Rifle",
            "tradable": 1,
            "marketable": 0,
        }
    ],
    "total_inventory_count": 2,
    "success": 1,
}

LEGACY_BODY = {
    "result": {
        "status": 1,
        "items": [
            {"id": 11, "original_id": 10, "defindex": 7, "level": 1, "quality": 4, "inventory": 2147483650, "quantity": 1},
        ],
    }
}


class SnapshotSourceTests(unittest.TestCase):
    def _fetch(self, response):
        session = fake_session(response)
        source = SnapshotInventorySource(make_config(inventory_page_size=5000), session)
        return source.fetch(STEAM_ID), session

    def test_fetch_normalizes_assets_and_descriptions(self) -> None:
        contents, session = self._fetch(fake_response(200, SNAPSHOT_BODY))
        self.assertEqual(contents.file_prefix, "cs2_inventory")
        self.assertEqual([h.fields["Asset ID"] for h in contents.holdings], ["1001", "1002"])
        self.assertEqual(contents.holdings[0].key, "310776_302028390")
        desc = contents.descriptions[0]
        self.assertEqual(desc.name, "AWP | Asiimov (Field-Tested)")
        self.assertTrue(desc.tradable)
        self.assertFalse(desc.marketable)

        args, kwargs = session.get.call_args
        self.assertEqual(args[0], f"https://steamcommunity.com/inventory/{STEAM_ID}/730/2")
        self.assertEqual(kwargs["params"], {"l": "english", "count": 5000})

    def test_page_size_is_capped(self) -> None:
        self.assertEqual(make_config(inventory_page_size=100000).inventory_page_size, 5000)

    def test_status_mapping(self) -> None:
        cases = [
            (400, AccessError),
            (403, AccessError),
            (401, AccessError),
            (404, NotFoundError),
            (429, UpstreamError),
            (500, UpstreamError),
            (502, UpstreamError),
        ]
        for status, error in cases:
            with self.subTest(status=status):
                with self.assertRaises(error):
                    self._fetch(fake_response(status, "nope"))

    def test_gone_is_plain_upstream_error_for_snapshot(self) -> None:
        with self.assertRaises(UpstreamError) as ctx:
            self._fetch(fake_response(410, "gone"))
        self.assertNotIsInstance(ctx.exception, UpstreamGoneError)

    def test_missing_collections_is_not_found(self) -> None:
        for body in (None, {}, {"assets": []}, {"descriptions": []}, {"success": False}, []):
            with self.subTest(body=body):
                with self.assertRaises(NotFoundError):
                    self._fetch(fake_response(200, body))

    def test_empty_assets_is_empty_result(self) -> None:
        with self.assertRaises(EmptyResultError):
            self._fetch(fake_response(200, {"assets": [], "descriptions": []}))

    def test_zero_count_without_assets_is_empty_result(self) -> None:
        with self.assertRaises(EmptyResultError):
            self._fetch(fake_response(200, {"total_inventory_count": 0, "success": 1}))

    def test_non_json_body_is_upstream_error(self) -> None:
        with self.assertRaises(UpstreamError):
            self._fetch(fake_response(200, non_json=True))

    def test_network_failure_is_upstream_error(self) -> None:
        session = fake_session()
        session.get.side_effect = requests.Timeout("slow")
        with self.assertRaises(UpstreamError):
            SnapshotInventorySource(make_config(), session).fetch(STEAM_ID)


class LegacySourceTests(unittest.TestCase):
    def _fetch(self, response):
        session = fake_session(response)
        source = LegacyInventorySource(make_config(steam_api_key="abc", inventory_backend="legacy"), session)
        return source.fetch(STEAM_ID), session

    def test_fetch_items(self) -> None:
        contents, session = self._fetch(fake_response(200, LEGACY_BODY))
        self.assertIsNone(contents.descriptions)
        self.assertEqual(contents.file_prefix, "cs2_items")
        holding = contents.holdings[0]
        self.assertEqual((holding.class_key, holding.instance_key, holding.amount), ("7", "4", 1))
        self.assertEqual(holding.fields["Item ID"], 11)

        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://api.steampowered.com/IEconItems_730/GetPlayerItems/v1/")
        self.assertEqual(kwargs["params"], {"key": "abc", "steamid": STEAM_ID})

    def test_non_ok_status_is_access_error(self) -> None:
        for status in (8, 15, 0):
            with self.subTest(status=status):
                with self.assertRaises(AccessError):
                    self._fetch(fake_response(200, {"result": {"status": status}}))

    def test_gone_has_distinct_error(self) -> None:
        with self.assertRaises(UpstreamGoneError) as ctx:
            self._fetch(fake_response(410, "Gone"))
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertNotEqual(ctx.exception.message, UpstreamError.default_message)

    def test_status_mapping(self) -> None:
        cases = [
            (400, AccessError),
            (404, NotFoundError),
            (429, UpstreamError),
            (500, UpstreamError),
            (502, UpstreamError),
        ]
        for status, error in cases:
            with self.subTest(status=status):
                with self.assertRaises(error) as ctx:
                    self._fetch(fake_response(status, "nope"))
                self.assertNotIsInstance(ctx.exception, UpstreamGoneError)

    def test_network_failure_is_upstream_error(self) -> None:
        session = fake_session()
        session.get.side_effect = requests.Timeout("slow")
        source = LegacyInventorySource(make_config(inventory_backend="legacy"), session)
        with self.assertRaises(UpstreamError):
            source.fetch(STEAM_ID)
        self.assertEqual(session.get.call_count, 1)

    def test_non_ok_status_is_logged_by_name(self) -> None:
        for status, label in ((15, "private profile"), (8, "invalid steamid"), (3, "unknown")):
            with self.subTest(status=status):
                with self.assertLogs("inventory_export.sources", level="INFO") as logs:
                    with self.assertRaises(AccessError):
                        self._fetch(fake_response(200, {"result": {"status": status}}))
                self.assertIn(f"status {status} ({label})", "\n".join(logs.output))

    def test_forbidden_is_access_error(self) -> None:
        with self.assertRaises(AccessError):
            self._fetch(fake_response(403, "Forbidden"))

    def test_missing_items_is_not_found(self) -> None:
        for body in ({}, {"result": None}, {"result": {"status": 1}}):
            with self.subTest(body=body):
                with self.assertRaises(NotFoundError):
                    self._fetch(fake_response(200, body))

    def test_empty_items_is_empty_result(self) -> None:
        with self.assertRaises(EmptyResultError):
            self._fetch(fake_response(200, {"result": {"status": 1, "items": []}}))


class BuildInventorySourceTests(unittest.TestCase):
    def test_backend_selection(self) -> None:
        session = fake_session()
        self.assertIsInstance(build_inventory_source(make_config(inventory_backend="snapshot"), session), SnapshotInventorySource)
        self.assertIsInstance(build_inventory_source(make_config(inventory_backend=" Legacy "), session), LegacyInventorySource)

    def test_unknown_backend_is_rejected(self) -> None:
        from pydantic import ValidationError

        with self.assertRaises(ValidationError):
            make_config(inventory_backend="scraper")


if __name__ == "__main__":
    unittest.main()
