from pydantic import BaseModel


class TopicResponse(BaseModel):
    id: int
    document_id: int
    title: str
    summary: str
    order: int
    difficulty: int
    estimated_minutes: int
    keywords: list[str]

    class Config:
        from_attributes = True
