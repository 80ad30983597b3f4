import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.website import AdminNote, Publication, Temoignage
from schemas.website import (
    AdminNoteCreate, PublicationRecord, PublicationSave, TemoignageCreate, TemoignageRecord,
)
from services.labels import excerpt, fr_date, to_slug

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Website CMS"])


def save_or_fail(db: Session, message: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Ce slug est déjà utilisé.")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise HTTPException(status_code=500, detail=message)


def get_publication_or_404(db: Session, publication_id: int) -> Publication:
    post = db.query(Publication).filter(Publication.id == publication_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Article introuvable.")
    return post


def publication_link(slug: str) -> str:
    return f"{settings.SITE_URL}/publication/{slug}"


# ===============================
#  1. PUBLIC API (magazine)
# ===============================

@router.get("/api/v1/publications")
def get_publications(db: Session = Depends(get_db)):
    # Published only, newest first
    posts = db.query(Publication).filter(Publication.status == "published").order_by(Publication.created_at.desc(), Publication.id.desc()).all()

    formatted = []
    for item in posts:
        formatted.append({
            "id": item.id,
            "slug": item.slug,
            "title": item.title,
            "cover_url": item.cover_url,
            "date": fr_date(item.created_at.date()) if item.created_at else "",
            "excerpt": excerpt(item.content),
        })
    return formatted


@router.get("/api/v1/publications/{slug}")
def get_publication(slug: str, db: Session = Depends(get_db)):
    post = db.query(Publication).filter(Publication.slug == slug, Publication.status == "published").first()
    if not post:
        raise HTTPException(status_code=404, detail="Article introuvable.")
    return PublicationRecord.model_validate(post)


# ===============================
#  2. ADMIN API (publications)
# ===============================

@router.get("/api/v1/admin/publications")
def get_all_publications(db: Session = Depends(get_db)):
    posts = db.query(Publication).order_by(Publication.created_at.desc(), Publication.id.desc()).all()
    return [PublicationRecord.model_validate(p) for p in posts]


def apply_form(post: Publication, data: PublicationSave):
    final_slug = to_slug(data.slug) if data.slug else to_slug(data.title)
    if not data.title.strip() or not data.content.strip() or not final_slug:
        raise HTTPException(status_code=400, detail="Complète Titre, Contenu et Slug.")

    post.title = data.title.strip()
    post.slug = final_slug
    post.content = data.content
    post.cover_url = data.cover_url or post.cover_url
    post.status = data.status


@router.post("/api/v1/admin/publications")
def add_publication(data: PublicationSave, db: Session = Depends(get_db)):
    post = Publication()
    apply_form(post, data)
    db.add(post)
    save_or_fail(db, "Erreur enregistrement")

    logger.info("Publication #%s created (%s)", post.id, post.slug)
    return {"status": "success", "message": "Article enregistré ✅", "id": post.id, "slug": post.slug}


@router.put("/api/v1/admin/publications/{publication_id}")
def update_publication(publication_id: int, data: PublicationSave, db: Session = Depends(get_db)):
    post = get_publication_or_404(db, publication_id)
    apply_form(post, data)
    save_or_fail(db, "Erreur enregistrement")
    return {"status": "success", "message": "Article modifié ✅", "id": post.id, "slug": post.slug}


@router.post("/api/v1/admin/publications/{publication_id}/toggle")
def toggle_publication(publication_id: int, db: Session = Depends(get_db)):
    post = get_publication_or_404(db, publication_id)
    post.status = "draft" if post.status == "published" else "published"
    save_or_fail(db, "Erreur lors du changement de statut.")
    return {"status": post.status}


@router.get("/api/v1/admin/publications/{publication_id}/link")
def get_publication_link(publication_id: int, db: Session = Depends(get_db)):
    post = get_publication_or_404(db, publication_id)
    if post.status != "published":
        raise HTTPException(status_code=400, detail="Article non publié.")
    return {"url": publication_link(post.slug)}


@router.delete("/api/v1/admin/publications/{publication_id}")
def delete_publication(publication_id: int, db: Session = Depends(get_db)):
    post = get_publication_or_404(db, publication_id)
    db.delete(post)
    save_or_fail(db, "Suppression échouée")
    return {"status": "deleted"}


# --- Admin notes ---
@router.get("/api/v1/admin/notes")
def get_admin_notes(db: Session = Depends(get_db)):
    notes = db.query(AdminNote).order_by(AdminNote.created_at.desc(), AdminNote.id.desc()).limit(20).all()
    return [{"id": n.id, "content": n.content, "created_at": n.created_at} for n in notes]


@router.post("/api/v1/admin/notes")
def add_admin_note(data: AdminNoteCreate, db: Session = Depends(get_db)):
    text = data.content.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Note vide.")
    note = AdminNote(content=text)
    db.add(note)
    save_or_fail(db, "Erreur lors de l'enregistrement de la note.")
    return {"status": "success", "id": note.id}


# ===============================
#  3. TESTIMONIALS
# ===============================

@router.get("/api/v1/temoignages")
def get_temoignages(db: Session = Depends(get_db)):
    rows = db.query(Temoignage).order_by(Temoignage.created_at.desc(), Temoignage.id.desc()).limit(50).all()
    return [TemoignageRecord.model_validate(r) for r in rows]


@router.post("/api/v1/temoignages")
def add_temoignage(data: TemoignageCreate, db: Session = Depends(get_db)):
    nom = data.nom.strip()
    message = data.message.strip()
    if not nom or not message:
        raise HTTPException(status_code=400, detail="Nom et message sont obligatoires.")

    row = Temoignage(nom=nom, message=message, note=data.note)
    db.add(row)
    save_or_fail(db, "Erreur lors de l'enregistrement du témoignage.")
    return {"status": "success", "message": "Merci pour votre témoignage !", "id": row.id}


@router.delete("/api/v1/admin/temoignages/{temoignage_id}")
def delete_temoignage(temoignage_id: int, db: Session = Depends(get_db)):
    row = db.query(Temoignage).filter(Temoignage.id == temoignage_id).first()
    if row:
        db.delete(row)
        save_or_fail(db, "Erreur lors de la suppression.")
        return {"status": "deleted"}

    raise HTTPException(status_code=404, detail="Témoignage introuvable.")
