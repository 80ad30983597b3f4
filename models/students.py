from sqlalchemy import Column, Integer, String, Date, DateTime, JSON
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime


class Student(Base):
    __tablename__ = "etudiants"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.now)
    nom = Column(String(150), nullable=True, index=True)

    # --- CONTACT ---
    email = Column(String(150), nullable=True)
    telephone = Column(String(30), nullable=True)
    date_naissance = Column(Date, nullable=True)
    responsable_nom = Column(String(150), nullable=True)
    responsable_tel = Column(String(30), nullable=True)

    # --- FORMATION ---
    programme = Column(String(100), nullable=True)   # e.g. "maquillage", free text in old rows
    specialites = Column(JSON, nullable=True)        # ["maquillage", ...]
    groupe = Column(String(20), nullable=True)       # "semaine" / "weekend" (legacy: "1" / "2")
    statut = Column(String(20), default="actif")     # "actif" / "archive"

    paiements = relationship("Payment", back_populates="etudiant", cascade="all, delete-orphan")


# Students moved out of the active list, kept for re-enrolment
class ArchivedStudent(Base):
    __tablename__ = "etudiants_archive"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.now)  # archive date
    nom = Column(String(150), nullable=True)
    email = Column(String(150), nullable=True)
    telephone = Column(String(30), nullable=True)
    date_naissance = Column(Date, nullable=True)
    responsable_nom = Column(String(150), nullable=True)
    responsable_tel = Column(String(30), nullable=True)
    programme = Column(String(100), nullable=True)
    specialites = Column(JSON, nullable=True)
    groupe = Column(String(20), nullable=True)
    statut = Column(String(20), default="archive")


# Columns copied between etudiants <-> etudiants_archive
TRANSFER_FIELDS = [
    "nom", "email", "telephone", "date_naissance", "responsable_nom",
    "responsable_tel", "programme", "specialites", "groupe",
]
