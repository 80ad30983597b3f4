"""
Students Router
List / edit / delete enrolled students, archive them, CSV export
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.paiements import Payment
from models.students import ArchivedStudent, Student, TRANSFER_FIELDS
from schemas.students import StudentRecord, StudentUpdate
from services.exports import students_csv
from services.labels import (
    groupe_key, groupe_label, student_programme_label, student_statut_label, strip_accents,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/etudiants", tags=["Etudiants"])


def student_to_dict(rec: StudentRecord) -> dict:
    data = rec.model_dump()
    data["programme_label"] = student_programme_label(rec.programme, rec.specialites)
    data["groupe_label"] = groupe_label(rec.groupe)
    data["statut_label"] = student_statut_label(rec.statut)
    return data


def get_student_or_404(db: Session, student_id: int) -> Student:
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise HTTPException(status_code=404, detail="Étudiant introuvable.")
    return student


def filter_students(students, q: str = "", groupe: str = "", statut: str = "", mois_naissance: Optional[int] = None):
    needle = strip_accents(q.strip())
    result = []
    for s in students:
        if groupe and groupe_key(s.groupe) != groupe:
            continue
        if statut and (s.statut or "actif").lower() != statut:
            continue
        if mois_naissance is not None:
            if not s.date_naissance or s.date_naissance.month != mois_naissance:
                continue
        if needle:
            hay = strip_accents(" ".join([
                s.nom or "",
                s.email or "",
                s.telephone or "",
                student_programme_label(s.programme, s.specialites),
                groupe_label(s.groupe),
            ]))
            if needle not in hay:
                continue
        result.append(s)
    return result


def load_students(db: Session):
    try:
        rows = db.query(Student).order_by(Student.created_at.desc(), Student.id.desc()).all()
    except SQLAlchemyError:
        logger.exception("Could not load students")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement des étudiants.")
    return [StudentRecord.model_validate(r) for r in rows]


# ===============================
#   1. SPECIFIC ROUTES (before /{id})
# ===============================

@router.get("/export.csv")
def export_students(
    q: str = "",
    groupe: str = "",
    statut: str = "",
    mois_naissance: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
):
    students = filter_students(load_students(db), q, groupe, statut, mois_naissance)
    filename = f"etudiants_kbs_{date.today().isoformat()}.csv"
    return Response(
        content=students_csv(students),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
def list_students(
    q: str = "",
    groupe: str = "",
    statut: str = "",
    mois_naissance: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
):
    """Newest first. groupe: semaine/weekend, statut: actif/archive"""
    students = filter_students(load_students(db), q, groupe, statut, mois_naissance)
    return [student_to_dict(s) for s in students]


# ===============================
#   2. SINGLE STUDENT
# ===============================

@router.get("/{student_id}")
def get_student(student_id: int, db: Session = Depends(get_db)):
    student = get_student_or_404(db, student_id)
    return student_to_dict(StudentRecord.model_validate(student))


@router.put("/{student_id}")
def update_student(student_id: int, data: StudentUpdate, db: Session = Depends(get_db)):
    student = get_student_or_404(db, student_id)

    student.nom = data.nom or None
    student.email = data.email or None
    student.telephone = data.telephone or None
    student.date_naissance = data.date_naissance
    student.responsable_nom = data.responsable_nom or None
    student.responsable_tel = data.responsable_tel or None
    student.programme = data.programme or None
    # keep specialites in sync with the programme
    student.specialites = [data.programme] if data.programme else None
    student.statut = data.statut or None
    student.groupe = str(data.groupe) if data.groupe not in (None, "") else None

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Update failed for student %s", student_id)
        raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement.")

    return student_to_dict(StudentRecord.model_validate(student))


@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student = get_student_or_404(db, student_id)
    try:
        db.delete(student)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Delete failed for student %s", student_id)
        raise HTTPException(status_code=500, detail="Erreur lors de la suppression.")
    return {"status": "deleted"}


@router.post("/{student_id}/archive")
def archive_student(student_id: int, db: Session = Depends(get_db)):
    """Move the student to etudiants_archive, payment history follows"""
    student = get_student_or_404(db, student_id)

    archived = ArchivedStudent(statut="archive")
    for field in TRANSFER_FIELDS:
        setattr(archived, field, getattr(student, field))

    try:
        db.add(archived)
        db.flush()
        moved = (
            db.query(Payment)
            .filter(Payment.etudiant_id == student.id)
            .update({"etudiant_id": None, "archive_id": archived.id}, synchronize_session="fetch")
        )
        # reload so the delete cascade no longer sees the moved payments
        db.expire(student, ["paiements"])
        db.delete(student)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Archive failed for student %s", student_id)
        raise HTTPException(status_code=500, detail="Erreur pendant l'archivage.")

    logger.info("Student #%s archived as #%s (%s payments kept)", student_id, archived.id, moved)
    return {"status": "archived", "archive_id": archived.id}
