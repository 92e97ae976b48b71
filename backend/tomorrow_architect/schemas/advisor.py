from pydantic import BaseModel, Field


class ReviewResponse(BaseModel):
    review: str
    fallback: bool = False


class ScheduledTime(BaseModel):
    id: str
    suggested_time: str = Field(..., alias="suggestedTime")

    class Config:
        populate_by_name = True


class OptimizeResponse(BaseModel):
    start_time: str = Field(..., alias="startTime")
    scheduled: list[ScheduledTime]
    message: str

    class Config:
        populate_by_name = True
