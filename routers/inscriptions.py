import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Form
from fastapi.responses import Response
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.inscriptions import Inscription
from models.students import Student
from schemas.inscriptions import InscriptionNotes, InscriptionRecord, InscriptionUpdate
from services.exports import inscriptions_csv
from services.notifications import send_inscription_emails
from services.labels import (
    fr_date, fr_datetime, horaire_label, inscription_programme_label, iso_from_fr, strip_accents,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/inscriptions", tags=["Inscriptions"])

DUPLICATE_MESSAGE = "Doublon: même email + date de naissance."


def inscription_to_dict(row: Inscription) -> dict:
    rec = InscriptionRecord.model_validate(row)
    data = rec.model_dump()
    data["programme_label"] = inscription_programme_label(rec.specialites, rec.programme)
    data["date_naissance_fr"] = fr_date(rec.date_naissance)
    data["created_at_fr"] = fr_datetime(rec.created_at)
    return data


def get_inscription_or_404(db: Session, inscription_id: int) -> Inscription:
    row = db.query(Inscription).filter(Inscription.id == inscription_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Inscription introuvable.")
    return row


def commit_or_500(db: Session, message: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise HTTPException(status_code=500, detail=message)


# ===============================
#  1. PUBLIC FORM
# ===============================

@router.post("")
def submit_inscription(
    nom: str = Form(...),
    email: Optional[str] = Form(None),
    telephone: Optional[str] = Form(None),
    date_naissance: Optional[date] = Form(None),
    responsable_nom: Optional[str] = Form(None),
    responsable_tel: Optional[str] = Form(None),
    specialites: List[str] = Form([]),
    programme: str = Form(""),
    db: Session = Depends(get_db),
):
    nom = nom.strip()
    if not nom:
        raise HTTPException(status_code=400, detail="Le nom est obligatoire.")

    specs = [s.strip().lower() for s in specialites if s and s.strip()]
    horaire = programme.strip().lower() or None

    row = Inscription(
        nom=nom,
        email=(email or "").strip() or None,
        telephone=(telephone or "").strip() or None,
        date_naissance=date_naissance,
        responsable_nom=(responsable_nom or "").strip() or None,
        responsable_tel=(responsable_tel or "").strip() or None,
        specialites=specs,
        programme=horaire,
    )
    db.add(row)
    commit_or_500(db, "Erreur lors de l'enregistrement de l'inscription.")

    logger.info("New inscription #%s: %s (%s)", row.id, nom,
                inscription_programme_label(specs, horaire))

    # Row is committed, a mail failure must not undo the registration
    send_inscription_emails(row.nom, row.email, row.telephone, specs, horaire)
    return {"status": "success", "id": row.id}


# ===============================
#  2. ADMIN (specific routes first)
# ===============================

@router.get("/export.csv")
def export_inscriptions(db: Session = Depends(get_db)):
    rows = db.query(Inscription).order_by(Inscription.created_at.desc()).all()
    records = [InscriptionRecord.model_validate(r) for r in rows]
    filename = f"inscriptions_{date.today().isoformat()}.csv"
    return Response(
        content=inscriptions_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
def list_inscriptions(q: str = "", horaire: str = "", db: Session = Depends(get_db)):
    """Latest 500 registrations, accent-insensitive search + horaire filter"""
    try:
        rows = db.query(Inscription).order_by(Inscription.created_at.desc(), Inscription.id.desc()).limit(500).all()
    except SQLAlchemyError:
        logger.exception("Could not load inscriptions")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement des inscriptions.")

    needle = strip_accents(q.strip())
    wanted = horaire.strip().lower()

    result = []
    for row in rows:
        if wanted and horaire_label(row.programme).lower() != wanted:
            continue
        if needle:
            hay = strip_accents(" ".join([
                row.nom or "",
                row.email or "",
                row.telephone or "",
                inscription_programme_label(row.specialites, row.programme),
            ]))
            if needle not in hay:
                continue
        result.append(inscription_to_dict(row))
    return result


@router.get("/{inscription_id}")
def get_inscription(inscription_id: int, db: Session = Depends(get_db)):
    return inscription_to_dict(get_inscription_or_404(db, inscription_id))


@router.put("/{inscription_id}")
def update_inscription(inscription_id: int, data: InscriptionUpdate, db: Session = Depends(get_db)):
    row = get_inscription_or_404(db, inscription_id)

    if not data.nom.strip():
        raise HTTPException(status_code=400, detail="Le nom est obligatoire.")
    if not data.programme:
        raise HTTPException(status_code=400, detail="Choisissez l'horaire (Semaine ou Weekend).")
    if not data.specialites:
        raise HTTPException(status_code=400, detail="Sélectionnez au moins une spécialité.")
    birth = iso_from_fr(data.date_naissance_fr)
    if not birth:
        raise HTTPException(status_code=400, detail="Date de naissance invalide (JJ/MM/AAAA).")

    row.nom = data.nom.strip()
    row.email = data.email.strip()
    row.telephone = data.telephone.strip()
    row.date_naissance = birth
    row.responsable_nom = data.responsable_nom.strip()
    row.responsable_tel = data.responsable_tel.strip()
    row.specialites = [s.lower() for s in data.specialites]
    row.programme = data.programme
    commit_or_500(db, "Erreur lors de la mise à jour.")

    return inscription_to_dict(row)


@router.put("/{inscription_id}/notes")
def update_notes(inscription_id: int, data: InscriptionNotes, db: Session = Depends(get_db)):
    row = get_inscription_or_404(db, inscription_id)
    row.notes = (data.notes or "").strip() or None
    commit_or_500(db, "Erreur lors de l'enregistrement des notes.")
    return {"status": "success", "notes": row.notes}


@router.delete("/{inscription_id}")
def delete_inscription(inscription_id: int, db: Session = Depends(get_db)):
    row = get_inscription_or_404(db, inscription_id)
    db.delete(row)
    commit_or_500(db, "Erreur lors de la suppression.")
    return {"status": "deleted"}


@router.post("/{inscription_id}/confirm")
def confirm_inscription(inscription_id: int, db: Session = Depends(get_db)):
    """Registration accepted: create the student record"""
    row = get_inscription_or_404(db, inscription_id)

    specs = row.specialites or []
    student = Student(
        nom=row.nom,
        email=row.email,
        telephone=row.telephone,
        date_naissance=row.date_naissance,
        responsable_nom=row.responsable_nom,
        responsable_tel=row.responsable_tel,
        programme=specs[0] if specs else None,
        specialites=specs,
        groupe=(row.programme or "semaine").lower(),
        statut="actif",
    )
    db.add(student)
    commit_or_500(db, "Erreur lors de la création de l'étudiante.")

    logger.info("Inscription #%s confirmed as student #%s", row.id, student.id)
    return {"status": "success", "etudiant_id": student.id}
