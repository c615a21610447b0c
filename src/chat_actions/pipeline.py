"""End-to-end action pipeline: tool calls + reply -> resolved items -> actions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from chat_actions.actions.models import Action, ViewMenuAction
from chat_actions.actions.synthesizer import ActionSynthesizer
from chat_actions.agent.tool_calls import ToolCallResult
from chat_actions.cart import CartSnapshot
from chat_actions.config import EngineConfig
from chat_actions.matching.catalog import CatalogSource
from chat_actions.obs.tracing import Timer, TraceStore
from chat_actions.reconcile.evidence import EvidenceReconciliator
from chat_actions.types import ResolvedItem

logger = logging.getLogger(__name__)


class ActionEngine:
    """Runs reconciliation and synthesis for one conversational turn.

    The engine holds only collaborators and config; each `run` builds its
    mentions, matches and resolved items from scratch. Unexpected failures
    degrade to a single view-menu action so the chat turn still completes,
    unless `config.strict` is set.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        *,
        config: EngineConfig | None = None,
        trace_store: TraceStore | None = None,
        reconciliator: EvidenceReconciliator | None = None,
        synthesizer: ActionSynthesizer | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.trace_store = trace_store
        self.reconciliator = reconciliator or EvidenceReconciliator(
            catalog,
            config=self.config.reconcile,
            extraction_config=self.config.extraction,
            matching_config=self.config.matching,
        )
        self.synthesizer = synthesizer or ActionSynthesizer(self.config.actions)

    async def run(
        self,
        message: str,
        tool_calls: Sequence[ToolCallResult],
        cart: CartSnapshot | None = None,
    ) -> list[Action]:
        cart = cart or CartSnapshot()
        resolved: list[ResolvedItem] = []
        error: str | None = None

        with Timer() as timer:
            try:
                resolved = await self.reconciliator.reconcile(tool_calls, message)
                actions = self.synthesizer.synthesize(
                    resolved, cart, tool_calls, message=message
                )
            except Exception as exc:
                if self.config.strict:
                    raise
                logger.exception("Action resolution failed; falling back to view menu")
                error = f"{type(exc).__name__}: {exc}"
                actions = [ViewMenuAction(label=self.config.actions.view_menu_label)]

        if self.trace_store is not None:
            self.trace_store.create_record(
                message=message,
                tool_names=[call.name for call in tool_calls],
                evidence_layer=resolved[0].source if resolved else None,
                resolved_ids=[item.id for item in resolved],
                mentioned_ids=[item.id for item in resolved if item.mentioned],
                action_types=[action.type for action in actions],
                latency_ms=timer.elapsed_ms,
                fallback=error is not None,
                error=error,
            )
        return actions
