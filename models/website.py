from sqlalchemy import Column, Integer, String, Text, DateTime
from database import Base
from datetime import datetime


# Magazine articles
class Publication(Base):
    __tablename__ = "publication"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    cover_url = Column(String(500), nullable=True)
    status = Column(String(20), default="published")  # 'draft' / 'published'
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


# Internal notes shown on the publications admin page
class AdminNote(Base):
    __tablename__ = "admin_note"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now)


class Temoignage(Base):
    __tablename__ = "temoignages"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.now, index=True)
    nom = Column(String(150), nullable=False)
    message = Column(Text, nullable=False)
    note = Column(Integer, nullable=True)  # 1..5 stars
