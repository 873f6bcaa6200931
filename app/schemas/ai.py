from pydantic import BaseModel, Field


class SummarizeRequest(BaseModel):
    text: str
    max_sentences: int = Field(default=5, ge=1, le=20)


class SummarizeResponse(BaseModel):
    summary: str
