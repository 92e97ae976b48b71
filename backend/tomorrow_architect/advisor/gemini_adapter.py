from __future__ import annotations

import json
import os
from typing import Any, Sequence

from tomorrow_architect.advisor.adapter import AdvisorAdapter, LocalAdvisorMixin
from tomorrow_architect.advisor.prompts import build_review_prompt, build_schedule_prompt
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.scheduling import ScheduleItem

try:
    import google.generativeai as genai
except ImportError:  # pragma: no cover - optional dependency
    genai = None  # type: ignore[assignment]

SCHEDULE_RESPONSE_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "suggestedTime": {"type": "string"},
        },
        "required": ["id", "suggestedTime"],
    },
}


class GeminiAdvisorAdapter(LocalAdvisorMixin, AdvisorAdapter):
    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = "gemini-1.5-flash",
        timeout: float = 30.0,
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.timeout = timeout
        if genai and self.api_key:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(model_name)
        else:
            self.model = None

    def review_plans(self, tasks: Sequence[Task]) -> str:
        if not self.model:
            return self._fallback_review(tasks)
        result = self.model.generate_content(
            build_review_prompt(tasks),
            request_options={"timeout": self.timeout},
        )
        return result.text

    def generate_schedule(self, items: Sequence[ScheduleItem], start_time: str) -> Any:
        if not self.model:
            return self._fallback_schedule(items, start_time)
        result = self.model.generate_content(
            build_schedule_prompt(items, start_time),
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": SCHEDULE_RESPONSE_SCHEMA,
            },
            request_options={"timeout": self.timeout},
        )
        return json.loads(result.text or "[]")
