import logging
from database import SessionLocal, engine, Base
from models.students import Student
from models.paiements import Payment
from models.inscriptions import Inscription
from models.website import Publication, Temoignage

logger = logging.getLogger("seed")

# --- Create tables if missing ---
Base.metadata.create_all(bind=engine)


def seed_data():
    db = SessionLocal()
    logger.info("Seeding demo data...")

    try:
        # 1. STUDENTS (one per programme and track)
        students = [
            {"nom": "Anne Joseph", "telephone": "50941000001", "programme": "maquillage", "groupe": "semaine"},
            {"nom": "Bella Pierre", "telephone": "50941000002", "programme": "maquillage", "groupe": "weekend"},
            {"nom": "Carline Louis", "telephone": "50941000003", "programme": "cosmetologie", "groupe": "semaine"},
            {"nom": "Dina Charles", "telephone": "50941000004", "programme": "decoration", "groupe": "weekend"},
        ]

        ids = {}
        for s in students:
            exists = db.query(Student).filter_by(nom=s["nom"]).first()
            if not exists:
                new_student = Student(specialites=[s["programme"]], statut="actif", **s)
                db.add(new_student)
                db.commit()
                db.refresh(new_student)
                ids[s["nom"]] = new_student.id
                logger.info("Added student: %s", s["nom"])
            else:
                ids[s["nom"]] = exists.id

        # 2. PAYMENTS (first quarter)
        payments = [
            ("Anne Joseph", ["01", "02", "03"], "paye"),
            ("Bella Pierre", ["01"], "paye"),
            ("Bella Pierre", ["02"], "non_paye"),
            ("Carline Louis", ["01", "02"], "paye"),
        ]
        for nom, months, statut in payments:
            for mois in months:
                exists = db.query(Payment).filter_by(etudiant_id=ids[nom], mois=mois, statut=statut).first()
                if not exists:
                    db.add(Payment(etudiant_id=ids[nom], mois=mois, statut=statut))
        db.commit()

        # 3. ONE PENDING INSCRIPTION
        if not db.query(Inscription).filter_by(nom="Esther Michel").first():
            db.add(Inscription(nom="Esther Michel", telephone="50941000005",
                               specialites=["cosmetologie"], programme="weekend"))
            db.commit()

        # 4. WEBSITE CONTENT
        if not db.query(Publication).filter_by(slug="rentree-2025").first():
            db.add(Publication(title="Rentrée 2025", slug="rentree-2025",
                               content="Les inscriptions pour la rentrée sont ouvertes.", status="published"))
        if not db.query(Temoignage).first():
            db.add(Temoignage(nom="Mirlande", message="Une formation au top !", note=5))
        db.commit()

        logger.info("All data seeded successfully")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_data()
