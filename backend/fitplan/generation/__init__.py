from fitplan.generation.client import InFlightGuard, PlanGenerationClient
from fitplan.generation.parser import extract_json_text, parse_plan
from fitplan.generation.prompt import build_plan_prompt

__all__ = ["InFlightGuard", "PlanGenerationClient", "build_plan_prompt", "extract_json_text", "parse_plan"]
