from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional, Literal


class InscriptionRecord(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    nom: str
    email: Optional[str] = None
    telephone: Optional[str] = None
    date_naissance: Optional[date] = None
    responsable_nom: Optional[str] = None
    responsable_tel: Optional[str] = None
    specialites: Optional[List[str]] = None
    programme: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


# Admin edit form, birth date typed as "JJ/MM/AAAA"
class InscriptionUpdate(BaseModel):
    nom: str
    email: str = ""
    telephone: str = ""
    date_naissance_fr: str
    responsable_nom: str = ""
    responsable_tel: str = ""
    specialites: List[str] = []
    programme: Literal["", "semaine", "weekend"] = ""


class InscriptionNotes(BaseModel):
    notes: Optional[str] = None
