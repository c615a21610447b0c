"""FastAPI entrypoint for action resolution and trace endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from chat_actions.actions.models import ViewMenuAction, dump_actions
from chat_actions.agent.tool_calls import ToolCallResult
from chat_actions.cart import CartSnapshot
from chat_actions.config import EngineConfig
from chat_actions.matching.catalog import StaticCatalog
from chat_actions.obs.log_config import setup_logging
from chat_actions.obs.tracing import TraceStore
from chat_actions.pipeline import ActionEngine
from chat_actions.types import CatalogContractError

logger = logging.getLogger(__name__)


class ActionsRequest(BaseModel):
    message: str = ""
    tool_calls: list[ToolCallResult] = Field(default_factory=list)
    cart: CartSnapshot = Field(default_factory=CartSnapshot)
    catalog: list[dict[str, Any]] = Field(default_factory=list)


setup_logging()

app = FastAPI(title="Chat Action Engine", version="0.1.0")

_config = EngineConfig.from_env()
_trace_store = TraceStore()


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "strict": _config.strict,
        "similarity_threshold": _config.matching.similarity_threshold,
        "trace_count": len(_trace_store.list_recent(limit=1000)),
    }


@app.post("/actions")
async def resolve_actions(request: ActionsRequest) -> dict[str, Any]:
    try:
        catalog = StaticCatalog.from_records(request.catalog)
    except CatalogContractError as exc:
        if _config.strict:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        logger.exception("Rejected catalog snapshot; serving view-menu fallback")
        fallback = ViewMenuAction(label=_config.actions.view_menu_label)
        _trace_store.create_record(
            message=request.message,
            tool_names=[call.name for call in request.tool_calls],
            evidence_layer=None,
            resolved_ids=[],
            mentioned_ids=[],
            action_types=[fallback.type],
            latency_ms=0.0,
            fallback=True,
            error=f"{type(exc).__name__}: {exc}",
        )
        return {"actions": dump_actions([fallback])}

    engine = ActionEngine(catalog, config=_config, trace_store=_trace_store)
    actions = await engine.run(request.message, request.tool_calls, request.cart)
    return {"actions": dump_actions(actions)}


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    records = [asdict(record) for record in _trace_store.list_recent(limit=limit)]
    return {"items": records}


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _trace_store.summary()
