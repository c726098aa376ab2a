import logging
import re
from typing import Any, Optional

import requests

from inventory_export.config import AppConfig
from inventory_export.errors import ResolutionError, UpstreamError
from inventory_export.http import get_json

logger = logging.getLogger(__name__)

RESOLVE_VANITY_URL = "https://api.steampowered.com/ISteamUser/ResolveVanityURL/v1/"

STEAM_ID_RE = re.compile(r"\d{17}", re.ASCII)
PROFILE_MARKERS = ("profiles", "id")


def is_steam_id(token: Any) -> bool:
    return isinstance(token, str) and STEAM_ID_RE.fullmatch(token) is not None


def extract_identifier(reference: Any) -> Optional[str]:
    """
    Pull the profile token out of a profile URL or a bare alias.

    Accepts:
      - "https://steamcommunity.com/profiles/76561197960287930/"
      - "https://steamcommunity.com/id/myalias?l=english"
      - "myalias"

    The token is the segment after the last "profiles"/"id" marker, or the
    final segment when no marker is present. Returns None when nothing usable
    is found; never raises.
    """
    if not isinstance(reference, str):
        return None
    s = reference.strip()
    s = s.split("#", 1)[0].split("?", 1)[0]
    if s.endswith("/"):
        s = s[:-1]
    parts = [p for p in s.split("/") if p]
    if not parts:
        return None

    marker_at = None
    for i, part in enumerate(parts):
        if part.lower() in PROFILE_MARKERS:
            marker_at = i
    if marker_at is not None:
        if marker_at + 1 < len(parts):
            return parts[marker_at + 1]
        return None

    return parts[-1]


def resolve_steam_id(token: str, config: AppConfig, session: requests.Session) -> str:
    if is_steam_id(token):
        return token

    data = get_json(
        session,
        RESOLVE_VANITY_URL,
        params={"key": config.steam_api_key, "vanityurl": token},
        timeout=config.request_timeout_s,
    )
    response = data.get("response") if isinstance(data, dict) else None
    if not isinstance(response, dict) or response.get("success") != 1:
        logger.info("Vanity name %r did not resolve: %s", token, response)
        raise ResolutionError()

    steam_id = str(response.get("steamid") or "")
    if not is_steam_id(steam_id):
        logger.warning("Vanity lookup for %r returned malformed steamid %r", token, steam_id)
        raise UpstreamError()

    logger.info("Resolved vanity name %r to %s", token, steam_id)
    return steam_id
