import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from inventory_export.config import AppConfig
from inventory_export.csv_encoder import encode_csv
from inventory_export.errors import ConfigurationError, EmptyResultError, ValidationError
from inventory_export.identifiers import extract_identifier, resolve_steam_id
from inventory_export.responses import csv_file_name
from inventory_export.rows import build_rows
from inventory_export.sources import InventorySource, build_inventory_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    steam_id: str
    file_name: str
    content: str


def export_inventory(
    profile_reference: Any,
    config: AppConfig,
    session: requests.Session,
    source: Optional[InventorySource] = None,
) -> ExportResult:
    """
    Run the whole export for one profile reference.

    Raises an InventoryExportError subclass on every failure; nothing is retried.
    """
    if not config.steam_api_key:
        raise ConfigurationError()
    if not profile_reference:
        raise ValidationError("Profile URL is required.")

    token = extract_identifier(profile_reference)
    if not token:
        raise ValidationError()

    steam_id = resolve_steam_id(token, config, session)

    if source is None:
        source = build_inventory_source(config, session)
    contents = source.fetch(steam_id)

    rows = build_rows(contents)
    if not rows:
        raise EmptyResultError()

    file_name = csv_file_name(contents.file_prefix, steam_id)
    logger.info("Exporting %d rows for %s from %s backend", len(rows), steam_id, source.name)
    return ExportResult(steam_id=steam_id, file_name=file_name, content=encode_csv(rows))
