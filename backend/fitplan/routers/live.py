"""
Live workout sessions over a WebSocket.

The server owns the engine and its timers; the client sends actions and
renders the snapshots it is pushed. Closing the socket discards the session.

Client -> server: ``{"action": "start_timer" | "complete_set" | "skip_rest" | "close"}``
Server -> client: engine snapshots, or ``{"error": "..."}`` for a refused action.
"""
import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from jose.exceptions import ExpiredSignatureError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.websockets import WebSocketState

from fitplan.db import get_db
from fitplan.deps.auth import user_from_token
from fitplan.errors import InvalidTransition, NotFound, StorageError
from fitplan.repositories.plan_repo import PlanRepository
from fitplan.schemas.plan import WorkoutRead
from fitplan.session import AsyncioClock, SessionState, WorkoutSessionEngine
from fitplan.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(tags=["live"])

ACTIONS = {
    "start_timer": WorkoutSessionEngine.start_timer,
    "complete_set": WorkoutSessionEngine.complete_set,
    "skip_rest": WorkoutSessionEngine.skip_rest,
}

def _load_workout(db: Session, token: str, workout_id: str) -> Optional[WorkoutRead]:
    try:
        user = user_from_token(db, token)
    except ExpiredSignatureError:
        return None
    if user is None:
        return None
    repo = PlanRepository(db)
    try:
        if repo.owner_of_workout(workout_id) != user.id:
            return None
        workout = repo.get_workout_detail(workout_id)
    except (NotFound, StorageError):
        return None
    return workout if workout.exercises else None

async def _read_actions(websocket: WebSocket, engine: WorkoutSessionEngine, outbox: asyncio.Queue):
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                outbox.put_nowait({"error": "messages must be JSON text frames"})
                continue
            try:
                message = json.loads(raw)
            except ValueError:
                outbox.put_nowait({"error": "messages must be JSON"})
                continue
            action = message.get("action") if isinstance(message, dict) else None
            if action == "close":
                break
            handler = ACTIONS.get(action)
            if handler is None:
                outbox.put_nowait({"error": f"unknown action: {action!r}"})
                continue
            try:
                handler(engine)
            except InvalidTransition as e:
                outbox.put_nowait({"error": str(e)})
    finally:
        engine.close()
        outbox.put_nowait(None)

@router.websocket("/workouts/{workout_id}/session")
async def live_session(
    websocket: WebSocket,
    workout_id: str,
    token: str = Query(""),
    db: Session = Depends(get_db),
):
    workout = await run_in_threadpool(_load_workout, db, token, workout_id)
    if workout is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    outbox: asyncio.Queue = asyncio.Queue()
    engine = WorkoutSessionEngine(
        workout.exercises,
        on_change=lambda e: outbox.put_nowait(e.snapshot()),
        on_complete=lambda: log.info("workout %s completed", workout_id),
        clock=AsyncioClock(),
        tick_seconds=get_settings().SESSION_TICK_SECONDS,
    )
    log.info("live session opened for workout %s", workout_id)
    reader = asyncio.create_task(_read_actions(websocket, engine, outbox))
    try:
        await websocket.send_json(engine.snapshot())
        while True:
            message = await outbox.get()
            if message is None:
                break
            await websocket.send_json(message)
            if message.get("state") == SessionState.completed.value:
                break
    except WebSocketDisconnect:
        pass
    finally:
        engine.close()
        reader.cancel()
        outcome, = await asyncio.gather(reader, return_exceptions=True)
        if isinstance(outcome, Exception):
            log.error("action reader for workout %s failed: %r", workout_id, outcome)
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
        log.info("live session closed for workout %s", workout_id)
