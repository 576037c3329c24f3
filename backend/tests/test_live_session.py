import uuid

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from fitplan.db import SessionLocal
from fitplan.main import app
from fitplan.repositories.plan_repo import PlanRepository
from fitplan.schemas.plan import ExerciseRead, WorkoutPlanRead, WorkoutRead
from fitplan.settings import get_settings

client = TestClient(app)
PWD = "StrongPassw0rd!"

def login_token():
    email = f"ws_{uuid.uuid4().hex[:10]}@example.com"
    client.post("/auth/register", json={"email": email, "name": "Ws", "password": PWD})
    return client.post("/auth/login", json={"email": email, "password": PWD}).json()["access_token"]

def new_id():
    return str(uuid.uuid4())

def saved_workout(token):
    """Squats 2x10 with 30s rest, then a single 45s plank."""
    user_id = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["id"]
    exercises = [
        ExerciseRead(id=new_id(), name="Squats", description="", sets=2, reps=10, duration=0, rest_time=30),
        ExerciseRead(id=new_id(), name="Plank", description="", sets=1, reps=1, duration=45, rest_time=0),
    ]
    workout = WorkoutRead(id=new_id(), title="Legs", description="", duration=20, level="beginner",
                          exercise_count=2, calories_burn=150, exercises=exercises)
    plan = WorkoutPlanRead(id=new_id(), title="P", description="", workouts=[workout])
    with SessionLocal() as db:
        PlanRepository(db).save(plan, user_id, atomic=True)
    return workout.id

@pytest.fixture
def fast_ticks(monkeypatch):
    monkeypatch.setattr(get_settings(), "SESSION_TICK_SECONDS", 0.01)

def test_live_session_walkthrough(fast_ticks):
    token = login_token()
    workout_id = saved_workout(token)
    with client.websocket_connect(f"/workouts/{workout_id}/session?token={token}") as ws:
        snap = ws.receive_json()
        assert (snap["state"], snap["exerciseIndex"], snap["currentSet"]) == ("awaiting_set_start", 0, 1)
        assert snap["exercise"]["name"] == "Squats"

        ws.send_json({"action": "complete_set"})
        snap = ws.receive_json()
        assert (snap["state"], snap["currentSet"], snap["restRemaining"]) == ("resting", 2, 30)

        ws.send_json({"action": "skip_rest"})
        snap = ws.receive_json()
        assert (snap["state"], snap["currentSet"]) == ("awaiting_set_start", 2)

        ws.send_json({"action": "complete_set"})
        snap = ws.receive_json()
        assert (snap["state"], snap["exerciseIndex"], snap["currentSet"]) == ("awaiting_set_start", 1, 1)
        assert snap["progress"] == 50

        ws.send_json({"action": "start_timer"})
        snap = ws.receive_json()
        assert (snap["state"], snap["exerciseRemaining"]) == ("exercise_timer_running", 45)

        remaining = []
        while snap["state"] != "completed":
            snap = ws.receive_json()
            remaining.append(snap["exerciseRemaining"])
        assert remaining[:-1] == list(range(44, 0, -1))
        assert snap["progress"] == 100

        with pytest.raises(WebSocketDisconnect) as exc:
            ws.receive_json()
        assert exc.value.code == 1000

def test_refused_action_reports_error():
    token = login_token()
    workout_id = saved_workout(token)
    with client.websocket_connect(f"/workouts/{workout_id}/session?token={token}") as ws:
        ws.receive_json()
        ws.send_json({"action": "start_timer"})
        assert "rep-based" in ws.receive_json()["error"]
        ws.send_json({"action": "dance"})
        assert "unknown action" in ws.receive_json()["error"]
        ws.send_text("not json")
        assert "JSON" in ws.receive_json()["error"]
        ws.send_bytes(b'{"action": "complete_set"}')
        assert "text frames" in ws.receive_json()["error"]
        # session carries on
        ws.send_json({"action": "complete_set"})
        assert ws.receive_json()["state"] == "resting"

def test_close_action_ends_session():
    token = login_token()
    workout_id = saved_workout(token)
    with client.websocket_connect(f"/workouts/{workout_id}/session?token={token}") as ws:
        ws.receive_json()
        ws.send_json({"action": "close"})
        with pytest.raises(WebSocketDisconnect) as exc:
            ws.receive_json()
        assert exc.value.code == 1000

@pytest.mark.parametrize("case", ["bad_token", "missing_workout", "foreign_workout"])
def test_connection_refused(case):
    token = login_token()
    workout_id = saved_workout(token)
    if case == "bad_token":
        token = "nope"
    elif case == "missing_workout":
        workout_id = new_id()
    else:
        token = login_token()
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/workouts/{workout_id}/session?token={token}") as ws:
            ws.receive_json()
    assert exc.value.code == 1008
