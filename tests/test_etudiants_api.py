from datetime import date

from models.paiements import Payment
from models.students import ArchivedStudent, Student


def test_list_with_labels(client, add_student):
    add_student("Anne", "cosmetologie", groupe="2")
    rows = client.get("/api/v1/etudiants").json()
    assert rows[0]["programme_label"] == "Cosmétologie"
    assert rows[0]["groupe_label"] == "Weekend"
    assert rows[0]["statut_label"] == "Actif"


def test_list_filters(client, add_student):
    add_student("Anne", "maquillage", groupe="semaine", date_naissance=date(2000, 3, 4))
    add_student("Bella", "decoration", groupe="weekend", statut="archive", date_naissance=date(1999, 7, 1))
    add_student("Célia", "cosmetologie", groupe="1")

    def names(**params):
        return sorted(r["nom"] for r in client.get("/api/v1/etudiants", params=params).json())

    assert names(groupe="weekend") == ["Bella"]
    assert names(groupe="semaine") == ["Anne", "Célia"]
    assert names(statut="archive") == ["Bella"]
    assert names(mois_naissance=3) == ["Anne"]
    assert names(q="celia") == ["Célia"]
    assert names(q="décoration") == ["Bella"]


def test_get_update_student(client, add_student):
    anne = add_student("Anne", "maquillage")
    res = client.put(f"/api/v1/etudiants/{anne.id}", json={
        "nom": "Anne Joseph", "programme": "decoration", "groupe": 2, "statut": "actif",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["specialites"] == ["decoration"]
    assert body["groupe_label"] == "Weekend"

    assert client.get(f"/api/v1/etudiants/{anne.id}").json()["nom"] == "Anne Joseph"
    assert client.get("/api/v1/etudiants/999").status_code == 404


def test_delete_student_removes_payments(client, db, add_student, add_payment):
    anne = add_student("Anne", "maquillage")
    add_payment(anne.id, "01")

    assert client.delete(f"/api/v1/etudiants/{anne.id}").status_code == 200
    assert db.query(Payment).count() == 0


def test_archive_and_reenroll(client, db, add_student):
    anne = add_student("Anne", "maquillage", groupe="weekend", telephone="509")

    res = client.post(f"/api/v1/etudiants/{anne.id}/archive")
    assert res.status_code == 200
    archive_id = res.json()["archive_id"]
    assert db.query(Student).count() == 0

    groups = {g["key"]: g for g in client.get("/api/v1/archives").json()}
    assert groups["maquillage"]["count"] == 1
    assert groups["cosmetologie"]["count"] == 0

    this_month = date.today().strftime("%Y-%m")
    assert client.get("/api/v1/archives", params={"mois_maquillage": this_month}).json()[0]["count"] == 1
    assert client.get("/api/v1/archives", params={"mois_maquillage": "2001-01"}).json()[0]["count"] == 0

    res = client.post(f"/api/v1/archives/{archive_id}/reinscrire")
    assert res.status_code == 200
    student = db.query(Student).filter(Student.id == res.json()["etudiant_id"]).first()
    assert student.nom == "Anne"
    assert student.statut == "actif"
    assert student.telephone == "509"
    assert db.query(ArchivedStudent).count() == 0


def test_payments_follow_student_through_archive(client, db, add_student, add_payment):
    anne = add_student("Anne", "maquillage")
    add_payment(anne.id, "01")
    add_payment(anne.id, "02", statut="non_paye")

    archive_id = client.post(f"/api/v1/etudiants/{anne.id}/archive").json()["archive_id"]
    assert db.query(Payment).count() == 2
    assert client.get("/api/v1/paiements").json() == []

    kept = client.get(f"/api/v1/archives/{archive_id}").json()["paiements"]
    assert [(p["mois"], p["statut_label"]) for p in kept] == [("01", "Payé"), ("02", "Non payé")]

    new_id = client.post(f"/api/v1/archives/{archive_id}/reinscrire").json()["etudiant_id"]
    db.expire_all()
    assert sorted(p.mois for p in db.query(Payment).filter(Payment.etudiant_id == new_id)) == ["01", "02"]
    assert db.query(Payment).filter(Payment.archive_id.isnot(None)).count() == 0

    body = client.get("/api/v1/paiements/resume", params={"start_maquillage": "01", "end_maquillage": "01"}).json()
    maq = next(c for c in body["categories"] if c["key"] == "maquillage")
    assert [(r["id"], r["statut_label"]) for r in maq["rows"]] == [(new_id, "Payé")]


def test_archive_not_found(client):
    assert client.get("/api/v1/archives/42").status_code == 404
    assert client.post("/api/v1/archives/42/reinscrire").status_code == 404


def test_export_students_csv(client, add_student):
    add_student("Anne; Marie", "maquillage", groupe="weekend", date_naissance=date(2000, 3, 4))
    res = client.get("/api/v1/etudiants/export.csv")
    assert res.status_code == 200
    assert res.content.startswith(b"\xef\xbb\xbf")
    lines = res.content.decode("utf-8-sig").strip().split("\n")
    assert lines[0] == "Date;Nom;Email;Téléphone;Naissance;Programme;Groupe;Statut"
    assert '"Anne; Marie"' in lines[1]
    assert lines[1].endswith("04/03/2000;Maquillage;Weekend;Actif")
