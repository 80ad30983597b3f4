from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime


class Payment(Base):
    __tablename__ = "paiements"

    id = Column(Integer, primary_key=True, index=True)
    # exactly one of etudiant_id / archive_id is set: payments follow the
    # student into the archive and back on re-enrolment
    etudiant_id = Column(Integer, ForeignKey("etudiants.id", ondelete="CASCADE"), nullable=True, index=True)
    archive_id = Column(Integer, ForeignKey("etudiants_archive.id", ondelete="SET NULL"), nullable=True, index=True)
    mois = Column(String(2), nullable=False)      # "01" .. "12"
    statut = Column(String(10), nullable=False)   # "paye" / "non_paye"
    created_at = Column(DateTime, default=datetime.now)

    etudiant = relationship("Student", back_populates="paiements")
