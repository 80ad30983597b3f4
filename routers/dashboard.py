import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.inscriptions import Inscription
from models.students import Student
from models.website import Temoignage
from services.labels import groupe_key
from services.paiements import PROGRAMME_KEYS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("/kpis")
def dashboard_kpis(db: Session = Depends(get_db)):
    now = datetime.now()
    since7 = now - timedelta(days=7)
    since30 = now - timedelta(days=30)

    try:
        # 1. Inscriptions
        total_insc = db.query(Inscription).count()
        weekly_insc = db.query(Inscription).filter(Inscription.created_at >= since7).count()

        # 2. Testimonials + average rating over 30 days
        total_tem = db.query(Temoignage).count()
        avg_note = db.query(func.avg(Temoignage.note))\
            .filter(Temoignage.note.isnot(None), Temoignage.created_at >= since30).scalar()
    except SQLAlchemyError:
        logger.exception("Dashboard KPIs failed")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement des indicateurs")

    return {
        "totalInsc": total_insc,
        "weeklyInsc": weekly_insc,
        "totalTem": total_tem,
        "avgNote30": round(float(avg_note), 1) if avg_note is not None else None,
    }


def has_programme(student: Student, key: str) -> bool:
    return student.programme == key or key in (student.specialites or [])


@router.get("/stats")
def student_stats(db: Session = Depends(get_db)):
    """Students per status, track and programme"""
    try:
        students = db.query(Student).all()
    except SQLAlchemyError:
        logger.exception("Student stats failed")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement des statistiques")

    tracks = [groupe_key(s.groupe) for s in students]

    by_prog = {}
    for key in PROGRAMME_KEYS:
        semaine = weekend = 0
        for s, track in zip(students, tracks):
            if not has_programme(s, key):
                continue
            if track == "semaine":
                semaine += 1
            elif track == "weekend":
                weekend += 1
        by_prog[key] = {"semaine": semaine, "weekend": weekend, "total": semaine + weekend}

    return {
        "total": len(students),
        "actifs": sum(1 for s in students if s.statut == "actif"),
        "archives": sum(1 for s in students if s.statut == "archive"),
        "semaine": tracks.count("semaine"),
        "weekend": tracks.count("weekend"),
        "maquillage": sum(1 for s in students if has_programme(s, "maquillage")),
        "cosmetologie": sum(1 for s in students if has_programme(s, "cosmetologie")),
        "decoration": sum(1 for s in students if has_programme(s, "decoration")),
        "byProg": by_prog,
    }
