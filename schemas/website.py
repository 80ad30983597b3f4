from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Literal


class PublicationRecord(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    cover_url: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin create/edit form (slug is derived from the title when empty)
class PublicationSave(BaseModel):
    title: str = ""
    slug: str = ""
    content: str = ""
    cover_url: Optional[str] = None
    status: Literal["draft", "published"] = "published"


class AdminNoteCreate(BaseModel):
    content: str


class TemoignageRecord(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    nom: str
    message: str
    note: Optional[int] = None

    class Config:
        from_attributes = True


class TemoignageCreate(BaseModel):
    nom: str = ""
    message: str = ""
    note: Optional[int] = Field(None, ge=1, le=5)
