from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional, Union, Literal


# Row of "etudiants" as it comes out of the database
class StudentRecord(BaseModel):
    id: int
    nom: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    date_naissance: Optional[date] = None
    responsable_nom: Optional[str] = None
    responsable_tel: Optional[str] = None
    programme: Optional[str] = None
    specialites: Optional[List[str]] = None
    groupe: Optional[Union[int, str]] = None  # text or numeric track code
    statut: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin edit form
class StudentUpdate(BaseModel):
    nom: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    date_naissance: Optional[date] = None
    responsable_nom: Optional[str] = None
    responsable_tel: Optional[str] = None
    programme: Optional[str] = None
    groupe: Optional[Union[int, str]] = None
    statut: Optional[Literal["actif", "archive"]] = None


class ArchivedStudentRecord(BaseModel):
    id: int
    nom: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    date_naissance: Optional[date] = None
    programme: Optional[str] = None
    specialites: Optional[List[str]] = None
    groupe: Optional[Union[int, str]] = None
    statut: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
