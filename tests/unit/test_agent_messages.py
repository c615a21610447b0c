import json
from dataclasses import dataclass

from langchain_core.messages import AIMessage, ToolMessage

from chat_actions.agent.messages import tool_calls_from_messages, tool_calls_from_steps
from chat_actions.agent.tool_calls import ToolName, parse_tool_calls


@dataclass(slots=True)
class _DummyAction:
    tool: str
    tool_input: dict[str, object]


def test_tool_messages_become_tool_call_results() -> None:
    content = json.dumps({"success": True, "items": [{"id": "x1", "name": "Chicken Tikka Masala", "price": 289}]})
    messages = [
        AIMessage(content="Let me look that up"),
        ToolMessage(content=content, name="searchMenuItems", tool_call_id="call-1"),
        {"role": "tool", "name": "proceedToCheckout", "content": "{}"},
        {"role": "assistant", "content": "Done!"},
    ]

    results = tool_calls_from_messages(messages)

    assert [r.tool for r in results] == [ToolName.CATALOG_SEARCH, ToolName.CHECKOUT_TRIGGER]
    evidence = parse_tool_calls(results)
    assert [hit.id for hit in evidence.search_items] == ["x1"]
    assert evidence.checkout_requested is True


def test_multipart_content_is_joined() -> None:
    message = ToolMessage(
        content=[{"type": "text", "text": '{"success": true, '}, '"items": []}'],
        name="getPopularItems",
        tool_call_id="call-2",
    )

    (result,) = tool_calls_from_messages([message])

    assert json.loads(result.payload) == {"success": True, "items": []}


def test_intermediate_steps_are_converted() -> None:
    steps = [
        (_DummyAction(tool="addItemToCart", tool_input={"itemId": "x1"}), '{"success": true}'),
        ("not-a-step",),
    ]

    results = tool_calls_from_steps(steps)

    assert [(r.name, r.tool) for r in results] == [("addItemToCart", ToolName.CART_MUTATION)]
