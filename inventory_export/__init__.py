from inventory_export.config import AppConfig, get_config
from inventory_export.errors import InventoryExportError
from inventory_export.pipeline import ExportResult, export_inventory

__all__ = [
    "AppConfig",
    "ExportResult",
    "InventoryExportError",
    "export_inventory",
    "get_config",
]
