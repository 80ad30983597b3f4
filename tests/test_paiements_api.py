import pytest


def categories_by_key(body):
    return {c["key"]: c for c in body["categories"]}


def test_record_payment(client, add_student):
    anne = add_student("Anne", "maquillage")
    res = client.post("/api/v1/paiements", json={"etudiant_id": anne.id, "mois": "03", "statut": "paye"})
    assert res.status_code == 200
    assert res.json()["status"] == "success"

    listed = client.get("/api/v1/paiements").json()
    assert len(listed) == 1
    assert listed[0]["etudiant_nom"] == "Anne"
    assert listed[0]["mois_label"] == "Mar"
    assert listed[0]["statut_label"] == "Payé"


def test_record_payment_unknown_student(client):
    res = client.post("/api/v1/paiements", json={"etudiant_id": 999, "mois": "01", "statut": "paye"})
    assert res.status_code == 404


def test_record_payment_rejects_bad_month_and_status(client, add_student):
    anne = add_student("Anne", "maquillage")
    assert client.post("/api/v1/paiements", json={"etudiant_id": anne.id, "mois": "13", "statut": "paye"}).status_code == 422
    assert client.post("/api/v1/paiements", json={"etudiant_id": anne.id, "mois": "1", "statut": "paye"}).status_code == 422
    assert client.post("/api/v1/paiements", json={"etudiant_id": anne.id, "mois": "01", "statut": "ok"}).status_code == 422


def test_student_search_for_payment_form(client, add_student):
    add_student("Marie Paul", "maquillage", telephone="509111")
    add_student("Judith", "decoration", telephone="509222")

    names = [s["nom"] for s in client.get("/api/v1/paiements/etudiants").json()]
    assert names == ["Judith", "Marie Paul"]

    found = client.get("/api/v1/paiements/etudiants", params={"search": "222"}).json()
    assert [s["nom"] for s in found] == ["Judith"]


def test_summary_per_category_range(client, add_student, add_payment):
    x = add_student("Xena", "maquillage")
    for mois in ("01", "02", "03"):
        add_payment(x.id, mois)

    body = client.get("/api/v1/paiements/resume", params={"start_maquillage": "01", "end_maquillage": "03"}).json()
    maq = categories_by_key(body)["maquillage"]
    assert maq["count"] == 1
    assert maq["rows"][0]["statut_label"] == "Payé"
    assert maq["rows"][0]["mois_label"] == "Jan - Fév - Mar"

    body = client.get("/api/v1/paiements/resume", params={"start_maquillage": "01", "end_maquillage": "04"}).json()
    assert categories_by_key(body)["maquillage"]["rows"][0]["statut_label"] == "Non payé"


def test_summary_ranges_are_independent(client, add_student, add_payment):
    a = add_student("Anne", "maquillage")
    c = add_student("Carline", "cosmetologie")
    add_payment(a.id, "01")
    add_payment(c.id, "01")

    body = client.get("/api/v1/paiements/resume", params={
        "start_maquillage": "01", "end_maquillage": "01",
        "start_cosmetologie": "01", "end_cosmetologie": "02",
    }).json()
    cats = categories_by_key(body)
    assert cats["maquillage"]["rows"][0]["statut_label"] == "Payé"
    assert cats["cosmetologie"]["rows"][0]["statut_label"] == "Non payé"
    assert cats["decoration"]["count"] == 0
    assert cats["decoration"]["rows"] == []


def test_summary_reads_unpadded_stored_month(client, add_student, add_payment):
    x = add_student("Xena", "maquillage")
    add_payment(x.id, "1")
    body = client.get("/api/v1/paiements/resume", params={"start_maquillage": "01", "end_maquillage": "01"}).json()
    row = categories_by_key(body)["maquillage"]["rows"][0]
    assert row["statut_label"] == "Payé"
    assert row["mois_label"] == "Jan"


def test_summary_reversed_range(client, add_student):
    add_student("Anne", "maquillage")
    body = client.get("/api/v1/paiements/resume", params={"start_maquillage": "06", "end_maquillage": "01"}).json()
    assert categories_by_key(body)["maquillage"]["mois"] == ["01", "02", "03", "04", "05", "06"]


def test_summary_status_filter_and_focus(client, add_student, add_payment):
    a = add_student("Anne", "maquillage")
    b = add_student("Bella", "maquillage")
    add_payment(a.id, "01")

    params = {"start_maquillage": "01", "end_maquillage": "01"}
    paid = client.get("/api/v1/paiements/resume", params={**params, "statut": "paye"}).json()
    assert [r["nom"] for r in categories_by_key(paid)["maquillage"]["rows"]] == ["Anne"]

    unpaid = client.get("/api/v1/paiements/resume", params={**params, "statut": "non_paye"}).json()
    assert [r["nom"] for r in categories_by_key(unpaid)["maquillage"]["rows"]] == ["Bella"]

    focused = client.get("/api/v1/paiements/resume", params={**params, "etudianteId": b.id}).json()
    assert focused["etudianteId"] == b.id
    assert [r["id"] for r in categories_by_key(focused)["maquillage"]["rows"]] == [b.id]


def test_summary_invalid_range_hidden_by_paid_filter(client, add_student, add_payment):
    a = add_student("Anne", "maquillage")
    add_payment(a.id, "01")
    params = {"start_maquillage": "zz", "end_maquillage": "01"}

    every = categories_by_key(client.get("/api/v1/paiements/resume", params=params).json())
    assert every["maquillage"]["rows"][0]["statut_label"] == "-"

    paid = categories_by_key(client.get("/api/v1/paiements/resume", params={**params, "statut": "paye"}).json())
    assert paid["maquillage"]["rows"] == []


def test_export_category_csv(client, add_student, add_payment):
    a = add_student("Anne, Marie", "maquillage", groupe="weekend")
    add_payment(a.id, "01")

    res = client.get("/api/v1/paiements/resume/maquillage/export.csv", params={"start": "01", "end": "02"})
    assert res.status_code == 200
    assert "paiements_maquillage_01-02.csv" in res.headers["content-disposition"]
    lines = res.text.strip().split("\n")
    assert lines[0] == "Nom,Groupe,Mois payés,Status"
    assert lines[1] == "Anne  Marie,weekend,Jan,Non payé"


@pytest.mark.parametrize("start,end,expected", [
    (" 1", "03", "paiements_maquillage_01-03.csv"),
    ("03", "1", "paiements_maquillage_01-03.csv"),
    ("zz", "03", "paiements_maquillage_zz-03.csv"),
])
def test_export_filename_uses_normalised_range(client, add_student, start, end, expected):
    add_student("Anne", "maquillage")
    res = client.get("/api/v1/paiements/resume/maquillage/export.csv", params={"start": start, "end": end})
    assert res.status_code == 200
    assert f'filename="{expected}"' in res.headers["content-disposition"]


def test_export_category_csv_empty(client):
    res = client.get("/api/v1/paiements/resume/decoration/export.csv")
    assert res.status_code == 404


def test_export_unknown_category(client):
    assert client.get("/api/v1/paiements/resume/coiffure/export.csv").status_code == 422
