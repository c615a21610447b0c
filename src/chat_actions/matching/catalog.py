"""Catalog source interfaces and concrete adapters."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from chat_actions.types import CatalogContractError, CatalogItem


class CatalogSource(Protocol):
    """Read-only access to the current catalog snapshot."""

    async def list_available(self) -> list[CatalogItem]:
        """Return every item currently available for ordering."""


class StaticCatalog:
    """Catalog snapshot held in memory, used by the API and tests."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items = list(items)
        self.reads = 0

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "StaticCatalog":
        """Build from plain dict rows (`isAvailable` or `is_available`)."""
        return cls(_record_to_item(record) for record in records)

    async def list_available(self) -> list[CatalogItem]:
        self.reads += 1
        return [item for item in self._items if item.is_available]


def _record_to_item(record: Mapping[str, Any]) -> CatalogItem:
    try:
        price = float(record.get("price"))
    except (TypeError, ValueError) as exc:
        raise CatalogContractError(
            f"Catalog item {record.get('id')!r} has invalid price {record.get('price')!r}"
        ) from exc
    return CatalogItem(
        id=str(record.get("id") or ""),
        name=str(record.get("name") or ""),
        price=price,
        category=str(record.get("category") or "Menu"),
        is_available=_parse_flag(record, record.get("isAvailable", record.get("is_available", True))),
    )


_TRUE_FLAGS = {"true", "1", "yes"}
_FALSE_FLAGS = {"false", "0", "no"}


def _parse_flag(record: Mapping[str, Any], value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_FLAGS:
            return True
        if text in _FALSE_FLAGS:
            return False
    raise CatalogContractError(
        f"Catalog item {record.get('id')!r} has invalid availability flag {value!r}"
    )
