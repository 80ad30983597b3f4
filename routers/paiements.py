"""
Payments Router - monthly payment sheet + per-programme summary
Record one month for one student, then read the "Payé / Non payé"
status of every student of a programme over a chosen period.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.paiements import Payment
from models.students import Student
from schemas.paiements import (
    CategoryBlock, CategoryView, PaymentCreate, PaymentRecord, ProgrammeKey, StatusFilter,
)
from schemas.students import StudentRecord
from services.exports import category_csv, category_csv_filename
from services.labels import fr_date
from services.paiements import (
    PROGRAMME_KEYS, PROGRAMME_TITLES, compose_category_rows, month_short, months_in_range, statut_label,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/paiements", tags=["Paiements"])

LOAD_ERROR = "Erreur lors du chargement des données (étudiants ou paiements)."


# =====================
# LOADERS
# =====================

def load_students(db: Session) -> List[StudentRecord]:
    """All students sorted by name, validated"""
    rows = db.query(Student).order_by(Student.nom.asc()).all()
    return [StudentRecord.model_validate(r) for r in rows]


def load_payments(db: Session) -> List[PaymentRecord]:
    # archived students' payments are parked on archive_id
    rows = (
        db.query(Payment)
        .filter(Payment.etudiant_id.isnot(None))
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
    return [PaymentRecord.model_validate(r) for r in rows]


def load_all(db: Session):
    try:
        return load_students(db), load_payments(db)
    except SQLAlchemyError:
        logger.exception("Could not load students/payments")
        raise HTTPException(status_code=500, detail=LOAD_ERROR)


def row_to_dict(row) -> dict:
    return {
        "id": row.etudiant.id,
        "nom": row.etudiant.nom or "(Sans nom)",
        "groupe": row.etudiant.groupe or "-",
        "mois_label": row.mois_label or "-",
        "statut_label": row.statut_label or "-",
    }


def block_to_dict(block: CategoryBlock) -> dict:
    return {
        "key": block.key,
        "title": block.title,
        "start": block.view.start,
        "end": block.view.end,
        "mois": block.mois,
        "count": len(block.rows),
        "rows": [row_to_dict(r) for r in block.rows],
    }


# =====================
# PAYMENT SHEET APIs
# =====================

@router.get("/etudiants")
def list_students_for_payment(search: str = "", db: Session = Depends(get_db)):
    """Light student list for the payment form, filtered on name or phone"""
    try:
        students = load_students(db)
    except SQLAlchemyError:
        logger.exception("Could not load students for payments")
        raise HTTPException(status_code=500, detail="Erreur lors du chargement de la liste des étudiantes.")

    needle = search.lower().strip()
    result = []
    for s in students:
        if needle and needle not in (s.nom or "").lower() and needle not in (s.telephone or "").lower():
            continue
        result.append({"id": s.id, "nom": s.nom, "telephone": s.telephone})
    return result


@router.get("")
def list_payments(db: Session = Depends(get_db)):
    """Recorded payments, newest first"""
    students, payments = load_all(db)
    names = {s.id: s.nom for s in students}

    data = []
    for p in payments:
        if p.etudiant_id in names:
            nom = names[p.etudiant_id] or "(Sans nom)"
        else:
            nom = f"(id: {p.etudiant_id})"
        data.append({
            "id": p.id,
            "etudiant_id": p.etudiant_id,
            "etudiant_nom": nom,
            "mois": p.mois,
            "mois_label": month_short(p.mois),
            "statut": p.statut,
            "statut_label": statut_label(p.statut),
            "created_at": fr_date(p.created_at.date()) if p.created_at else "-",
        })
    return data


@router.post("")
def record_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    student = db.query(Student).filter(Student.id == data.etudiant_id).first()
    if not student:
        raise HTTPException(status_code=404, detail="Étudiante introuvable.")

    payment = Payment(etudiant_id=data.etudiant_id, mois=data.mois, statut=data.statut)
    try:
        db.add(payment)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Payment insert failed for student %s", data.etudiant_id)
        raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement du paiement.")

    logger.info("Payment recorded: student=%s mois=%s statut=%s", data.etudiant_id, data.mois, data.statut)
    return {"status": "success", "message": "✅ Paiement enregistré avec succès.", "id": payment.id}


# =====================
# SUMMARY PER PROGRAMME
# =====================

def build_blocks(students, payments, views: dict) -> List[CategoryBlock]:
    blocks = []
    for key in PROGRAMME_KEYS:
        view = views[key]
        blocks.append(CategoryBlock(
            key=key,
            title=PROGRAMME_TITLES[key],
            view=view,
            mois=months_in_range(view.start, view.end),
            rows=compose_category_rows(students, payments, key, view),
        ))
    return blocks


@router.get("/resume")
def payment_summary(
    start_maquillage: str = "01",
    end_maquillage: str = "12",
    start_cosmetologie: str = "01",
    end_cosmetologie: str = "12",
    start_decoration: str = "01",
    end_decoration: str = "12",
    statut: StatusFilter = "all",
    etudiante_id: Optional[int] = Query(None, alias="etudianteId"),
    db: Session = Depends(get_db),
):
    """
    Three tables (maquillage / cosmetologie / decoration), each with its own
    period. `statut` filters every table, `etudianteId` narrows them to one
    student (link from the student page).
    """
    students, payments = load_all(db)

    ranges = {
        "maquillage": (start_maquillage, end_maquillage),
        "cosmetologie": (start_cosmetologie, end_cosmetologie),
        "decoration": (start_decoration, end_decoration),
    }
    views = {
        key: CategoryView(start=start, end=end, statut=statut, etudiante_id=etudiante_id)
        for key, (start, end) in ranges.items()
    }

    blocks = build_blocks(students, payments, views)
    return {
        "statut": statut,
        "etudianteId": etudiante_id,
        "categories": [block_to_dict(b) for b in blocks],
    }


@router.get("/resume/{key}/export.csv")
def export_category(
    key: ProgrammeKey,
    start: str = "01",
    end: str = "12",
    statut: StatusFilter = "all",
    etudiante_id: Optional[int] = Query(None, alias="etudianteId"),
    db: Session = Depends(get_db),
):
    students, payments = load_all(db)
    view = CategoryView(start=start, end=end, statut=statut, etudiante_id=etudiante_id)
    rows = compose_category_rows(students, payments, key, view)

    if not rows:
        raise HTTPException(status_code=404, detail="Aucune donnée à exporter pour cette catégorie.")

    filename = category_csv_filename(key, start, end)
    return Response(
        content=category_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
