from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional, Literal

from schemas.students import StudentRecord

ProgrammeKey = Literal["maquillage", "cosmetologie", "decoration"]
StatusFilter = Literal["all", "paye", "non_paye"]


class PaymentRecord(BaseModel):
    id: int
    etudiant_id: int
    mois: str
    statut: str
    created_at: Optional[datetime] = None

    @field_validator("mois", mode="before")
    @classmethod
    def pad_month(cls, v):
        # legacy rows may hold "1" instead of "01"
        text = str(v).strip() if v is not None else ""
        if text.isdigit() and 1 <= int(text) <= 12:
            return f"{int(text):02d}"
        return text

    class Config:
        from_attributes = True


# Monthly payment form
class PaymentCreate(BaseModel):
    etudiant_id: int
    mois: str = Field(..., pattern=r"^(0[1-9]|1[0-2])$")
    statut: Literal["paye", "non_paye"]


class CategoryView(BaseModel):
    """Selection of one category table: month range, status filter, focused student."""
    start: str = "01"
    end: str = "12"
    statut: StatusFilter = "all"
    etudiante_id: Optional[int] = None

    class Config:
        frozen = True


class CategoryRow(BaseModel):
    etudiant: StudentRecord
    mois_label: str
    statut_label: str

    class Config:
        frozen = True


class CategoryBlock(BaseModel):
    key: str
    title: str
    view: CategoryView
    mois: List[str]
    rows: List[CategoryRow]
