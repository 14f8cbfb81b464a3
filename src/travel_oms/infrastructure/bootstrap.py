"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Configuration comes from the environment:

- ``TRAVEL_OMS_DATA_DIR``: directory holding ``orders.json``
  (default: ``<project root>/data``)
- ``TRAVEL_OMS_LOG_LEVEL``: default CLI log level (default: ``WARNING``)
"""

from __future__ import annotations

import os
from pathlib import Path

from travel_oms.domain.service.order_id_service import OrderIdAllocationService
from travel_oms.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_LOG_LEVEL = "WARNING"


def data_dir() -> Path:
    override = os.environ.get("TRAVEL_OMS_DATA_DIR")
    return Path(override) if override else _DEFAULT_DATA_DIR


def log_level() -> str:
    return os.environ.get("TRAVEL_OMS_LOG_LEVEL", DEFAULT_LOG_LEVEL)


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def order_id_service(repo: JsonOrderRepository | None = None) -> OrderIdAllocationService:
    return OrderIdAllocationService(repo or order_repository())
