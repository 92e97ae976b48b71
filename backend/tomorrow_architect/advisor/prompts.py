"""Prompt text shared by the advisor adapters."""

from __future__ import annotations

import json
from typing import Sequence

from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.scheduling import ScheduleItem

COACH_PERSONA = "You are an expert productivity coach."


def build_plan_lines(tasks: Sequence[Task]) -> list[str]:
    return [f"- [{task.priority.value.upper()}] {task.content}" for task in tasks]


def build_review_prompt(tasks: Sequence[Task]) -> str:
    plan_list = "\n".join(build_plan_lines(tasks))
    return (
        f"{COACH_PERSONA} Review the following list of tasks planned for tomorrow:\n\n"
        f"{plan_list}\n\n"
        "Provide a concise, friendly response (under 100 words).\n"
        "1. Acknowledge the workload.\n"
        "2. Give 1 specific tip to ensure these get done (e.g., about prioritization or breaks).\n"
        "3. Be encouraging.\n"
        "Format as plain text, no markdown headers."
    )


def build_schedule_prompt(items: Sequence[ScheduleItem], start_time: str) -> str:
    task_data = json.dumps([item.as_dict() for item in items], ensure_ascii=False)
    return f"""Create an optimal schedule for these tasks.
Start time: {start_time}.

Tasks:
{task_data}

Rules:
1. Time Format: STRICTLY use 24-hour format (e.g. "09:30", "14:00", "18:15"). DO NOT use AM/PM.
2. Working Hours: 09:30 to 24:00 (Midnight).
3. Lunch Break: 12:00 to 13:30.
4. Dinner Break: 18:00 to 18:30.
5. Rest Time: 00:00 to 09:30.

Logic:
- Long tasks ARE ALLOWED to span across Lunch or Dinner breaks.
  Example: A 3-hour task starting at 11:00 is fine. The user works 11:00-12:00, takes a break, and resumes 13:30-15:30.
- The Start Time of a task must not fall inside a break.
  If a calculated start time is 12:15, move it to 13:30.
  If a calculated start time is 18:10, move it to 18:30.
- When calculating when the next task begins, account for the break time if the previous task spanned across it.
- Respect estimated durations (minutes).
- Group similar tasks (same category) if possible.
- Return only 'id' and 'suggestedTime' for each task."""
