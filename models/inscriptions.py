from sqlalchemy import Column, Integer, String, Date, DateTime, Text, JSON, UniqueConstraint
from database import Base
from datetime import datetime


class Inscription(Base):
    __tablename__ = "inscriptions"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.now, index=True)
    nom = Column(String(150), nullable=False)
    email = Column(String(150), nullable=True)
    telephone = Column(String(30), nullable=True)
    date_naissance = Column(Date, nullable=True)
    responsable_nom = Column(String(150), nullable=True)
    responsable_tel = Column(String(30), nullable=True)
    specialites = Column(JSON, nullable=True)   # ["maquillage", "cosmetologie", ...]
    programme = Column(String(20), nullable=True)   # horaire: "semaine" / "weekend"
    notes = Column(Text, nullable=True)

    # Same person cannot register twice
    __table_args__ = (
        UniqueConstraint("email", "date_naissance", name="uq_inscription_email_naissance"),
    )
