"""Cart snapshot supplied by the session store."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class CartLine(BaseModel):
    id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _lift_menu_item_id(cls, data: Any) -> Any:
        # Session carts store lines as {"menuItem": {"id": ...}, "quantity": n}.
        if isinstance(data, dict) and "id" not in data:
            menu_item = data.get("menuItem")
            if isinstance(menu_item, dict) and "id" in menu_item:
                return {**data, "id": menu_item["id"]}
        return data


class CartSnapshot(BaseModel):
    items: list[CartLine] = Field(default_factory=list)

    @property
    def item_ids(self) -> set[str]:
        return {line.id for line in self.items}

    @property
    def is_empty(self) -> bool:
        return not self.items
