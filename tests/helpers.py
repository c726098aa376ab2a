import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from inventory_export.config import AppConfig  # noqa: E402


def make_config(**overrides: Any) -> AppConfig:
    values = {"steam_api_key": "test-key", "inventory_backend": "snapshot"}
    values.update(overrides)
    return AppConfig(_env_file=None, **values)


def fake_response(status_code: int = 200, payload: Any = None, non_json: bool = False) -> MagicMock:
    r = MagicMock()
    r.status_code = status_code
    r.text = "" if payload is None else str(payload)
    if non_json:
        r.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        r.json.return_value = payload
    return r


def fake_session(*responses: MagicMock) -> MagicMock:
    session = MagicMock()
    session.get.side_effect = list(responses)
    session.__enter__.return_value = session
    return session
