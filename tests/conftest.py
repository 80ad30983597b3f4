import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RESEND_API_KEY"] = ""
os.environ["ADMIN_EMAILS"] = ""

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.paiements import Payment
from models.students import Student


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def add_student(db):
    def _add(nom, programme=None, groupe="semaine", statut="actif", **extra):
        student = Student(nom=nom, programme=programme, groupe=groupe, statut=statut,
                          specialites=[programme] if programme else None, **extra)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _add


@pytest.fixture
def add_payment(db):
    def _add(etudiant_id, mois, statut="paye"):
        payment = Payment(etudiant_id=etudiant_id, mois=mois, statut=statut)
        db.add(payment)
        db.commit()
        return payment
    return _add
