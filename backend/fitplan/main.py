# fitplan/main.py
import os
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from fitplan.routers.auth import router as auth_router
from fitplan.routers.profile import router as profile_router
from fitplan.routers.plans import router as plans_router
from fitplan.routers.workouts import router as workouts_router
from fitplan.routers.live import router as live_router
from fitplan.db import SessionLocal  # for healthz DB check
from fitplan.settings import get_settings

log = logging.getLogger("uvicorn")
logging.getLogger("fitplan").setLevel(get_settings().LOG_LEVEL.upper())

app = FastAPI(
    title="FitPlan API",
    openapi_tags=[
        {"name": "auth", "description": "Registration & login"},
        {"name": "profile", "description": "Onboarding fitness profile"},
        {"name": "plans", "description": "AI-generated workout plans"},
        {"name": "workouts", "description": "Saved workouts and their exercises"},
        {"name": "live", "description": "Live workout sessions (WebSocket)"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = os.getenv("ALLOW_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.get("/")
def root():
    return {"ok": True, "name": "FitPlan API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": os.getenv("API_VERSION", "dev")}

# Routers
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(plans_router)
app.include_router(workouts_router)
app.include_router(live_router)
