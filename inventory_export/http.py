import logging
from typing import Any, Dict, Optional

import requests

from inventory_export.config import AppConfig
from inventory_export.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_session(config: AppConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": config.user_agent, "Accept": "application/json"})
    return session


def http_get(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 15,
) -> requests.Response:
    """Issue one GET; transport failures become UpstreamError, status handling is the caller's."""
    try:
        return session.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Upstream request to %s failed: %s", url, e)
        raise UpstreamError() from e


def read_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        logger.warning("Upstream returned non-JSON (status %s): %s", response.status_code, response.text[:300])
        raise UpstreamError() from e


def get_json(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 15,
) -> Any:
    r = http_get(session, url, params=params, timeout=timeout)
    if r.status_code >= 400:
        logger.warning("Upstream error %s from %s: %s", r.status_code, url, r.text[:300])
        raise UpstreamError()
    return read_json(r)
