from tomorrow_architect.schemas.task import Task

WELCOME_TASK_ID = "welcome-task-1"

# Regenerate with GET /transfer/export-seed to redeploy a backup as the default data.
SEED_TASKS = [
    {
        "id": "welcome-task-1",
        "content": "Welcome! This is a sample task.",
        "isCompleted": False,
        "targetDate": "2025-12-17",
        "priority": "medium",
        "category": "personal",
        "createdAt": 1715000000000,
        "estimatedDuration": 15,
    },
    {
        "id": "6bb83f21-6ed9-4828-aefb-2784dc37f63a",
        "content": "setup HIL-SERL",
        "isCompleted": False,
        "targetDate": "2025-12-16",
        "priority": "high",
        "category": "research",
        "createdAt": 1765819593405,
        "estimatedDuration": 240,
        "suggestedTime": "14:00",
    },
    {
        "id": "fe14c985-56fa-4913-9787-58778fc4bf46",
        "content": "read book",
        "isCompleted": False,
        "targetDate": "2025-12-16",
        "priority": "medium",
        "category": "personal",
        "createdAt": 1765819606085,
        "estimatedDuration": 30,
        "suggestedTime": "10:30",
    },
    {
        "id": "1200e366-5e49-47a0-965b-f387555b2417",
        "content": "write paper draft",
        "isCompleted": False,
        "targetDate": "2025-12-16",
        "priority": "medium",
        "category": "research",
        "createdAt": 1765819624651,
        "estimatedDuration": 60,
        "suggestedTime": "09:30",
    },
]


def seed_tasks(tomorrow_key: str) -> list[Task]:
    """Built-in dataset; the welcome task is re-dated so it shows up tomorrow."""
    tasks = []
    for record in SEED_TASKS:
        task = Task.model_validate(record)
        if task.id == WELCOME_TASK_ID:
            task.target_date = tomorrow_key
        tasks.append(task)
    return tasks
