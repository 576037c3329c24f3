"""
Call the external generation service and turn its answer into a plan.

The backend is the only party holding the provider API key; clients reach
the model through ``POST /plans/generate``. Calls are single shot: a failure
is reported to the caller, who decides whether to try again.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import httpx

from fitplan.errors import GenerationInProgress, MalformedPlan, ServiceUnavailable
from fitplan.generation.parser import parse_plan
from fitplan.generation.prompt import build_plan_prompt
from fitplan.schemas.plan import WorkoutPlanRead
from fitplan.schemas.profile import FitnessProfileData
from fitplan.settings import Settings, get_settings

log = logging.getLogger(__name__)

TEMPERATURE = 0.4
TOP_K = 32
TOP_P = 0.95


class PlanGenerationClient:
    def __init__(self, settings: Optional[Settings] = None, *, http: Optional[httpx.Client] = None):
        self.settings = settings or get_settings()
        self._http = http

    @property
    def url(self) -> str:
        s = self.settings
        return f"{s.GEMINI_API_BASE.rstrip('/')}/models/{s.GEMINI_MODEL}:generateContent"

    def request_body(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "topK": TOP_K,
                "topP": TOP_P,
                "maxOutputTokens": self.settings.GENERATION_MAX_OUTPUT_TOKENS,
            },
        }

    def generate(self, profile: FitnessProfileData) -> WorkoutPlanRead:
        """Generate a plan for ``profile``.

        Raises ``ServiceUnavailable`` for transport errors and non-2xx answers,
        ``MalformedPlan`` when the answer cannot be turned into a plan.
        """
        text = self._complete(build_plan_prompt(profile))
        plan = parse_plan(text)
        log.info("generated plan %s with %d workouts", plan.id, len(plan.workouts))
        return plan

    def _complete(self, prompt: str) -> str:
        api_key = self.settings.GEMINI_API_KEY
        if not api_key:
            raise ServiceUnavailable("generation service is not configured")

        log.info("requesting workout plan from %s", self.settings.GEMINI_MODEL)
        try:
            with self._client() as http:
                r = http.post(
                    self.url,
                    headers={"x-goog-api-key": api_key},
                    json=self.request_body(prompt),
                    timeout=self.settings.GENERATION_TIMEOUT_SECONDS,
                )
        except httpx.HTTPError as e:
            log.warning("generation request failed: %s", e)
            raise ServiceUnavailable(f"generation service unreachable: {e}") from e

        if not r.is_success:
            log.warning("generation service answered %s: %s", r.status_code, r.text[:500])
            raise ServiceUnavailable(f"generation service returned HTTP {r.status_code}")

        try:
            return r.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedPlan("generation service returned no text content") from e

    @contextmanager
    def _client(self) -> Iterator[httpx.Client]:
        if self._http is not None:
            yield self._http
        else:
            with httpx.Client() as http:
                yield http


class InFlightGuard:
    """Allows one generation per user at a time; a second caller is refused, not queued."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active: set[str] = set()

    @contextmanager
    def claim(self, user_id: str) -> Iterator[None]:
        with self._lock:
            if user_id in self._active:
                raise GenerationInProgress("a workout plan is already being generated")
            self._active.add(user_id)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(user_id)

    def is_active(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._active
