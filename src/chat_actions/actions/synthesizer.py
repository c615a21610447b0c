"""Rule-based construction of purchase actions from resolved items."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from chat_actions.actions.models import (
    Action,
    AddAllToCartAction,
    AddToCartAction,
    BulkLine,
    CheckoutAction,
    UrgencyBadge,
    ViewMenuAction,
)
from chat_actions.agent.tool_calls import ToolCallResult, parse_tool_calls
from chat_actions.cart import CartSnapshot
from chat_actions.config import ActionConfig
from chat_actions.types import ResolvedItem

logger = logging.getLogger(__name__)


class ActionSynthesizer:
    """Turns reconciled items, cart state and tool signals into actions.

    Rules, in order:
    1. one add-to-cart per mentioned item, in resolution order;
    2. a trailing add-all when there are enough add actions and at least one
       item is not already in the cart;
    3. checkout when the cart was mutated this turn or is non-empty;
    4. an explicit checkout-trigger moves checkout to the front;
    5. view-menu when nothing else was produced and the reply talks about
       the menu.
    """

    def __init__(self, config: ActionConfig | None = None) -> None:
        self.config = config or ActionConfig()

    def synthesize(
        self,
        resolved: Sequence[ResolvedItem],
        cart: CartSnapshot,
        tool_calls: Iterable[ToolCallResult],
        *,
        message: str = "",
    ) -> list[Action]:
        evidence = parse_tool_calls(tool_calls)

        adds = [_add_action(item) for item in resolved if item.mentioned]
        actions: list[Action] = list(adds)

        bulk = self._bulk_action(adds, cart)
        if bulk is not None:
            actions.append(bulk)

        if evidence.cart_mutated or not cart.is_empty:
            actions.append(CheckoutAction(label=self.config.checkout_label))

        if evidence.checkout_requested:
            actions = self._checkout_first(actions)

        if not actions and any(
            keyword in message.lower() for keyword in self.config.view_menu_keywords
        ):
            actions.append(ViewMenuAction(label=self.config.view_menu_label))

        logger.debug("Synthesized actions: %s", [action.type for action in actions])
        return actions

    def _bulk_action(
        self, adds: list[AddToCartAction], cart: CartSnapshot
    ) -> AddAllToCartAction | None:
        if len(adds) < self.config.bulk_min_items:
            return None
        in_cart = cart.item_ids
        if all(action.item_id in in_cart for action in adds):
            logger.debug("Suppressing add-all: every item is already in the cart")
            return None

        return AddAllToCartAction(
            label=f"Add All {len(adds)} Items",
            items=[
                BulkLine(
                    item_id=action.item_id,
                    name=action.item_name,
                    quantity=1,
                    price=action.price,
                    menu_item=action.menu_item,
                )
                for action in adds
            ],
            total_price=sum(action.price for action in adds),
            item_count=len(adds),
        )

    def _checkout_first(self, actions: list[Action]) -> list[Action]:
        rest = [action for action in actions if not isinstance(action, CheckoutAction)]
        return [CheckoutAction(label=self.config.checkout_label), *rest]


def synthesize(
    resolved: Sequence[ResolvedItem],
    cart: CartSnapshot,
    tool_calls: Iterable[ToolCallResult],
    *,
    message: str = "",
    config: ActionConfig | None = None,
) -> list[Action]:
    return ActionSynthesizer(config).synthesize(resolved, cart, tool_calls, message=message)


def _add_action(item: ResolvedItem) -> AddToCartAction:
    urgency = None
    if item.urgency is not None:
        urgency = UrgencyBadge(
            level=item.urgency.level,
            message=item.urgency.message,
            demand_score=item.urgency.score,
        )
    return AddToCartAction(
        label=f"Add {item.name}",
        item_id=item.id,
        item_name=item.name,
        price=item.price,
        quantity=1,
        menu_item=dict(item.snapshot),
        urgency=urgency,
    )
