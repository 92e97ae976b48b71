from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    payload: str = Field(..., description="JSON array, or a pasted seed file containing one")
    confirm: bool = False


class ConfirmRequest(BaseModel):
    confirm: bool = False


class ReplaceResponse(BaseModel):
    count: int
    message: str
