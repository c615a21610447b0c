"""Presentation actions emitted by the engine.

Actions are plain value objects. They serialise with camelCase keys
(`model_dump(by_alias=True)`) for the chat UI, which renders them as buttons.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _ActionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class UrgencyBadge(_ActionModel):
    level: str
    message: str | None = None
    demand_score: float | None = None


class AddToCartAction(_ActionModel):
    type: Literal["add_to_cart"] = "add_to_cart"
    label: str
    item_id: str
    item_name: str
    price: float
    quantity: int = Field(default=1, ge=1)
    menu_item: dict[str, Any] = Field(default_factory=dict)
    urgency: UrgencyBadge | None = None


class BulkLine(_ActionModel):
    item_id: str
    name: str
    quantity: int = Field(default=1, ge=1)
    price: float
    menu_item: dict[str, Any] = Field(default_factory=dict)


class AddAllToCartAction(_ActionModel):
    type: Literal["add_all_to_cart"] = "add_all_to_cart"
    label: str
    items: list[BulkLine]
    total_price: float
    item_count: int


class CheckoutAction(_ActionModel):
    type: Literal["checkout"] = "checkout"
    label: str = "View Cart & Checkout"


class ViewMenuAction(_ActionModel):
    type: Literal["view_menu"] = "view_menu"
    label: str = "View Full Menu"


Action = Annotated[
    Union[AddToCartAction, AddAllToCartAction, CheckoutAction, ViewMenuAction],
    Field(discriminator="type"),
]

ActionList = TypeAdapter(list[Action])


def dump_actions(actions: list[Action]) -> list[dict[str, Any]]:
    """Serialise actions for the UI, dropping unset optional fields."""
    return ActionList.dump_python(actions, by_alias=True, exclude_none=True)
