import pytest

from chat_actions.matching.catalog import StaticCatalog
from chat_actions.types import CatalogContractError


@pytest.mark.asyncio
async def test_availability_flags_are_parsed_from_strings() -> None:
    catalog = StaticCatalog.from_records(
        [
            {"id": "a", "name": "Masala Dosa", "price": 149, "isAvailable": "false"},
            {"id": "b", "name": "Idli Sambar", "price": 99, "isAvailable": "True"},
            {"id": "c", "name": "Vada Pav", "price": 49, "is_available": 0},
            {"id": "d", "name": "Pav Bhaji", "price": 129},
        ]
    )

    available = await catalog.list_available()

    assert [item.id for item in available] == ["b", "d"]


def test_unrecognised_availability_flag_is_a_contract_error() -> None:
    with pytest.raises(CatalogContractError):
        StaticCatalog.from_records(
            [{"id": "a", "name": "Masala Dosa", "price": 149, "isAvailable": "maybe"}]
        )


def test_missing_price_is_a_contract_error() -> None:
    with pytest.raises(CatalogContractError):
        StaticCatalog.from_records([{"id": "a", "name": "Masala Dosa"}])
