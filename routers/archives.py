import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.paiements import Payment
from models.students import ArchivedStudent, Student, TRANSFER_FIELDS
from schemas.students import ArchivedStudentRecord
from services.labels import fr_date, groupe_label, strip_accents
from services.paiements import PROGRAMME_KEYS, PROGRAMME_TITLES, month_short, programme_match, statut_label

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/archives", tags=["Archives Etudiants"])


def month_match(rec: ArchivedStudentRecord, selected: Optional[str]) -> bool:
    # selected is "YYYY-MM", empty means every month
    if not selected:
        return True
    if not rec.created_at:
        return False
    return rec.created_at.strftime("%Y-%m") == selected


def search_match(rec: ArchivedStudentRecord, needle: str) -> bool:
    if not needle:
        return True
    hay = strip_accents(" ".join([rec.nom or "", rec.email or "", rec.telephone or ""]))
    return needle in hay


def archive_to_dict(rec: ArchivedStudentRecord) -> dict:
    data = rec.model_dump()
    data["groupe_label"] = groupe_label(rec.groupe)
    data["archive_le"] = fr_date(rec.created_at.date()) if rec.created_at else ""
    return data


def get_archive_or_404(db: Session, archive_id: int) -> ArchivedStudent:
    row = db.query(ArchivedStudent).filter(ArchivedStudent.id == archive_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Impossible de trouver cette étudiante archivée.")
    return row


@router.get("")
def list_archives(
    q: str = "",
    mois_maquillage: str = "",
    mois_cosmetologie: str = "",
    mois_decoration: str = "",
    db: Session = Depends(get_db),
):
    """Archived students grouped by programme, each group with its own archive month"""
    try:
        rows = db.query(ArchivedStudent).order_by(ArchivedStudent.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Could not load etudiants_archive")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement des archives d'étudiantes.")

    records = [ArchivedStudentRecord.model_validate(r) for r in rows]
    selected = {
        "maquillage": mois_maquillage,
        "cosmetologie": mois_cosmetologie,
        "decoration": mois_decoration,
    }
    needle = strip_accents(q.strip())

    groups = []
    for key in PROGRAMME_KEYS:
        items = [
            archive_to_dict(r) for r in records
            if programme_match(r.programme, key)
            and month_match(r, selected[key])
            and search_match(r, needle)
        ]
        groups.append({
            "key": key,
            "title": PROGRAMME_TITLES[key],
            "mois": selected[key],
            "count": len(items),
            "etudiants": items,
        })
    return groups


@router.get("/{archive_id}")
def get_archive(archive_id: int, db: Session = Depends(get_db)):
    data = archive_to_dict(ArchivedStudentRecord.model_validate(get_archive_or_404(db, archive_id)))
    payments = (
        db.query(Payment)
        .filter(Payment.archive_id == archive_id)
        .order_by(Payment.mois.asc(), Payment.id.asc())
        .all()
    )
    data["paiements"] = [
        {"mois": p.mois, "mois_label": month_short(p.mois), "statut": p.statut, "statut_label": statut_label(p.statut)}
        for p in payments
    ]
    return data


@router.post("/{archive_id}/reinscrire")
def reenroll(archive_id: int, db: Session = Depends(get_db)):
    """Back to etudiants with a new id, statut actif, payments included"""
    archived = get_archive_or_404(db, archive_id)

    student = Student(statut="actif")
    for field in TRANSFER_FIELDS:
        setattr(student, field, getattr(archived, field))

    try:
        db.add(student)
        db.flush()
        db.query(Payment).filter(Payment.archive_id == archived.id).update(
            {"etudiant_id": student.id, "archive_id": None}, synchronize_session="fetch"
        )
        db.delete(archived)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Re-enrolment failed for archive %s", archive_id)
        raise HTTPException(status_code=500, detail="Erreur pendant la réinscription.")

    logger.info("Archive #%s re-enrolled as student #%s", archive_id, student.id)
    return {"status": "success", "etudiant_id": student.id}
