from chat_actions.actions.models import (
    AddAllToCartAction,
    AddToCartAction,
    CheckoutAction,
    ViewMenuAction,
    dump_actions,
)
from chat_actions.actions.synthesizer import synthesize
from chat_actions.agent.tool_calls import ToolCallResult
from chat_actions.cart import CartSnapshot
from chat_actions.types import ResolvedItem, Urgency


def _resolved(item_id: str, name: str, price: float, *, mentioned: bool = True) -> ResolvedItem:
    return ResolvedItem(
        id=item_id,
        name=name,
        price=price,
        category="Main",
        confidence=1.0,
        source="tool",
        mentioned=mentioned,
        snapshot={"id": item_id, "name": name, "price": price},
    )


ITEMS = [
    _resolved("a", "Butter Chicken", 299),
    _resolved("b", "Garlic Naan", 49),
    _resolved("c", "Jeera Rice", 129),
]


def _cart(*ids: str) -> CartSnapshot:
    return CartSnapshot.model_validate({"items": [{"id": item_id, "quantity": 1} for item_id in ids]})


def test_one_add_action_per_mentioned_item_in_order() -> None:
    items = [*ITEMS[:2], _resolved("z", "Mango Lassi", 99, mentioned=False)]

    actions = synthesize(items, CartSnapshot(), [])

    assert [type(a) for a in actions] == [AddToCartAction, AddToCartAction, AddAllToCartAction]
    assert [a.item_id for a in actions[:2]] == ["a", "b"]
    assert actions[0].label == "Add Butter Chicken"
    assert actions[0].quantity == 1


def test_bulk_add_aggregates_price_and_count() -> None:
    actions = synthesize(ITEMS, _cart("a"), [])

    bulk = actions[3]
    assert isinstance(bulk, AddAllToCartAction)
    assert bulk.label == "Add All 3 Items"
    assert bulk.item_count == 3
    assert bulk.total_price == 477
    assert [line.item_id for line in bulk.items] == ["a", "b", "c"]
    assert isinstance(actions[4], CheckoutAction)


def test_bulk_add_suppressed_when_every_item_already_in_cart() -> None:
    actions = synthesize(ITEMS, _cart("a", "b", "c"), [])

    assert [a.type for a in actions] == ["add_to_cart", "add_to_cart", "add_to_cart", "checkout"]


def test_single_item_with_empty_cart_has_no_checkout() -> None:
    actions = synthesize(ITEMS[:1], CartSnapshot(), [])

    assert [a.type for a in actions] == ["add_to_cart"]


def test_cart_mutation_adds_checkout() -> None:
    actions = synthesize(ITEMS[:1], CartSnapshot(), [ToolCallResult(name="addItemToCart", payload={})])

    assert [a.type for a in actions] == ["add_to_cart", "checkout"]


def test_checkout_trigger_moves_checkout_to_front() -> None:
    before = synthesize(ITEMS[:2], _cart("a", "b"), [])
    assert [a.type for a in before].index("checkout") == 2

    after = synthesize(ITEMS[:2], _cart("a", "b"), [ToolCallResult(name="checkout-trigger")])

    assert [a.type for a in after] == ["checkout", "add_to_cart", "add_to_cart"]


def test_checkout_trigger_alone_still_yields_checkout() -> None:
    actions = synthesize([], CartSnapshot(), [ToolCallResult(name="proceedToCheckout")])

    assert actions == [CheckoutAction()]


def test_view_menu_fallback_only_when_nothing_else() -> None:
    fallback = synthesize([], CartSnapshot(), [], message="Want to browse our full MENU?")
    silent = synthesize([], CartSnapshot(), [], message="Thanks for ordering!")
    busy = synthesize(ITEMS[:1], CartSnapshot(), [], message="Our most popular dish")

    assert fallback == [ViewMenuAction()]
    assert silent == []
    assert [a.type for a in busy] == ["add_to_cart"]


def test_urgency_is_carried_and_serialised_in_camel_case() -> None:
    item = _resolved("a", "Butter Chicken", 299)
    item.urgency = Urgency(level="high", message="3 people have this in their cart", score=74)

    payload = dump_actions(synthesize([item], CartSnapshot(), []))

    assert payload == [
        {
            "type": "add_to_cart",
            "label": "Add Butter Chicken",
            "itemId": "a",
            "itemName": "Butter Chicken",
            "price": 299.0,
            "quantity": 1,
            "menuItem": {"id": "a", "name": "Butter Chicken", "price": 299},
            "urgency": {"level": "high", "message": "3 people have this in their cart", "demandScore": 74.0},
        }
    ]
