from pydantic import BaseModel, Field


class ProgressPublic(BaseModel):
    completed: int
    total: int
    percent: int


class DayWindowPublic(BaseModel):
    today_key: str = Field(..., alias="todayKey")
    tomorrow_key: str = Field(..., alias="tomorrowKey")
    today_label: str = Field(..., alias="todayLabel")
    tomorrow_label: str = Field(..., alias="tomorrowLabel")
    today_progress: ProgressPublic = Field(..., alias="todayProgress")
    tomorrow_progress: ProgressPublic = Field(..., alias="tomorrowProgress")
    # Advisor actions currently running, e.g. "optimize_tomorrow"
    advisor_busy: list[str] = Field(default_factory=list, alias="advisorBusy")

    class Config:
        populate_by_name = True
