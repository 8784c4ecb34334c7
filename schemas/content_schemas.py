from pydantic import BaseModel, Field


class VerseSchema(BaseModel):
    number: int = Field(..., gt=0)
    text: str


class DevotionalSchema(BaseModel):
    verseRef: str = Field(..., description="A scripture reference like John 3:16")
    verseText: str = Field(..., description="The full text of the verse")
    title: str = Field(..., description="A catchy spiritual title")
    content: str = Field(..., description="A 2-3 sentence spiritual reflection")
    prayer: str = Field(..., description="A short closing prayer")
