from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.scheduling import ScheduleItem, plan_sequence


class AdvisorAdapter(ABC):
    """Interface for the language-model advisor.

    Implementations may raise on transport or provider errors; callers treat
    every result as untrusted.
    """

    @abstractmethod
    def review_plans(self, tasks: Sequence[Task]) -> str:
        """Return a short, plain-text critique of a day's plan."""

    @abstractmethod
    def generate_schedule(self, items: Sequence[ScheduleItem], start_time: str) -> Any:
        """Return proposed start times as a list of {"id", "suggestedTime"} objects."""


class LocalAdvisorMixin:
    """Responses used when no model is configured."""

    def _fallback_review(self, tasks: Sequence[Task]) -> str:
        high = sum(1 for task in tasks if task.priority.value == "high")
        lines = [f"You have {len(tasks)} task(s) lined up for tomorrow."]
        if high:
            lines.append(f"Start with the {high} high-priority one(s) while your energy is fresh.")
        else:
            lines.append("Pick the most important one and do it first.")
        lines.append("Protect your lunch and dinner breaks, you'll finish stronger.")
        return " ".join(lines)

    def _fallback_schedule(self, items: Sequence[ScheduleItem], start_time: str) -> list[dict[str, str]]:
        return [
            {"id": task_id, "suggestedTime": label}
            for task_id, label in plan_sequence(items, start_time)
        ]
