from __future__ import annotations

from datetime import datetime, timezone

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool

from vibebot.calc.indicators import evaluate_indicator
from vibebot.calc.risk import summarize
from vibebot.dashboard.auth import require_token
from vibebot.dashboard.payloads import float_list, validate_bot_config_payload, validate_indicator_payload
from vibebot.runtime import build_runtime, make_broker
from vibebot.util.chat_log import get_events, record_chat_event
from vibebot.util.config import load_config

_FROM_ENV = object()


def create_app(*, config_path: str, broker=_FROM_ENV) -> FastAPI:
    cfg = load_config(config_path)
    if broker is _FROM_ENV:
        broker = make_broker(cfg)
    # chat events are written from background tasks below, not inside the assistant
    rt = build_runtime(cfg, broker=broker, log_messages=False)
    store = rt.store

    app = FastAPI(title="vibebot dashboard")
    app.state.runtime = rt

    @app.get("/api/health")
    def health():
        return {"ok": True, "ts": datetime.now(timezone.utc).isoformat(), "trading": rt.assistant.trading}

    @app.get("/api/indicators")
    def indicators():
        return [ind.model_dump() for ind in store.indicators]

    @app.post("/api/indicators")
    async def indicator_add(req: Request):
        require_token(req)
        ind = validate_indicator_payload(await req.json())
        try:
            store.add_indicator(ind)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return ind.model_dump()

    @app.delete("/api/indicators/{name}")
    async def indicator_delete(name: str, req: Request):
        require_token(req)
        try:
            removed = store.remove_indicator(name)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown indicator: {name}")
        return {"ok": True, "removed": removed.name}

    @app.get("/api/bot/config")
    def bot_config():
        return store.to_config()

    @app.post("/api/bot/config")
    async def bot_config_save(req: Request):
        require_token(req)
        payload = validate_bot_config_payload(await req.json())
        store.apply_config(payload)
        return {"ok": True, "config": store.to_config()}

    @app.post("/api/chat")
    async def chat(req: Request, background: BackgroundTasks):
        require_token(req)
        body = await req.json()
        message = str((body or {}).get("message") or "").strip()
        if not message:
            raise HTTPException(status_code=400, detail="Missing message")

        # broker calls block; keep them off the event loop
        reply = await run_in_threadpool(rt.assistant.process_message, message)
        actions = jsonable_encoder([a.to_dict() for a in reply.actions])
        if cfg.assistant.log_messages:
            background.add_task(
                record_chat_event,
                message=message,
                command=reply.command,
                actions=actions,
                base_dir=cfg.storage.chat_log_dir,
            )
        return {"response": reply.response, "actions": actions, "updated_config": store.to_config()}

    @app.get("/api/chat/log")
    def chat_log(limit: int = 200):
        return get_events(limit=limit, base_dir=cfg.storage.chat_log_dir)

    @app.post("/api/indicators/preview")
    async def indicators_preview(req: Request):
        """Latest value of every enabled indicator over the posted closes."""
        closes = float_list(await req.json(), "closes")
        values: dict[str, object] = {}
        skipped: list[str] = []
        for ind, st in store.active():
            try:
                values[ind.name] = evaluate_indicator(ind.name, st.value, closes)
            except KeyError:
                skipped.append(ind.name)
        return {"values": values, "skipped": skipped, "bars": len(closes)}

    @app.post("/api/metrics")
    async def metrics(req: Request):
        body = await req.json()
        returns = float_list(body, "returns")
        benchmark = float_list(body, "benchmark", required=False)
        try:
            rf = float((body or {}).get("risk_free", 0.0))
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="risk_free must be a number")
        return summarize(returns, benchmark, risk_free=rf)

    return app
