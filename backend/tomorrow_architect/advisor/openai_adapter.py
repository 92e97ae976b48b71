from __future__ import annotations

import json
import os
from typing import Any, Sequence

from tomorrow_architect.advisor.adapter import AdvisorAdapter, LocalAdvisorMixin
from tomorrow_architect.advisor.prompts import (
    COACH_PERSONA,
    build_review_prompt,
    build_schedule_prompt,
)
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.scheduling import ScheduleItem

try:
    from openai import OpenAI
except ImportError:  # pragma: no cover - optional dependency
    OpenAI = None  # type: ignore[assignment]


# json_object mode only returns objects, so the array is wrapped
SCHEDULE_FORMAT_HINT = (
    'Respond with a JSON object of the form {"schedule": [{"id": "...", "suggestedTime": "HH:MM"}]}.'
)


class OpenAIAdvisorAdapter(LocalAdvisorMixin, AdvisorAdapter):
    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = "gpt-4o-mini",
        timeout: float = 30.0,
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model_name = model_name
        self.client = (
            OpenAI(api_key=self.api_key, timeout=timeout)
            if (OpenAI and self.api_key)
            else None
        )

    def review_plans(self, tasks: Sequence[Task]) -> str:
        if not self.client:
            return self._fallback_review(tasks)
        completion = self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": COACH_PERSONA},
                {"role": "user", "content": build_review_prompt(tasks)},
            ],
            temperature=0.4,
        )
        return completion.choices[0].message.content

    def generate_schedule(self, items: Sequence[ScheduleItem], start_time: str) -> Any:
        if not self.client:
            return self._fallback_schedule(items, start_time)
        completion = self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": COACH_PERSONA + "\n" + SCHEDULE_FORMAT_HINT},
                {"role": "user", "content": build_schedule_prompt(items, start_time)},
            ],
            temperature=0.2,
            response_format={"type": "json_object"},
        )
        reply = completion.choices[0].message.content or "{}"
        parsed = json.loads(reply)
        if isinstance(parsed, dict):
            return parsed.get("schedule", [])
        return parsed
