import pytest
import resend

from config import settings
from models.inscriptions import Inscription


@pytest.fixture
def outbox(monkeypatch):
    """Captures what would be handed to Resend"""
    messages = []

    def fake_send(params, *args, **kwargs):
        messages.append(params)
        return {"id": f"msg-{len(messages)}"}

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test_key")
    monkeypatch.setattr(settings, "EMAIL_FROM", "Kisa <noreply@kisa.test>")
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["admin@kisa.test", "direction@kisa.test"])
    return messages


def register(client, **overrides):
    form = {
        "nom": "Esther Michel",
        "email": "esther@example.com",
        "telephone": "50941000005",
        "date_naissance": "2001-04-12",
        "specialites": ["maquillage", "decoration"],
        "programme": "weekend",
    }
    form.update(overrides)
    return client.post("/api/v1/inscriptions", data=form)


def test_registration_sends_admin_notice_and_acknowledgment(client, outbox):
    assert register(client).status_code == 200
    assert len(outbox) == 2

    admin, student = outbox
    assert admin["to"] == ["admin@kisa.test", "direction@kisa.test"]
    assert admin["from"] == "Kisa <noreply@kisa.test>"
    assert admin["subject"] == "Nouvelle inscription - Maquillage, Décoration / Weekend"
    assert "Nom : Esther Michel" in admin["text"]
    assert "Téléphone : 50941000005" in admin["text"]

    assert student["to"] == ["esther@example.com"]
    assert student["subject"] == "Nous avons bien reçu votre inscription - Kisa Beauty School"
    assert student["text"].startswith("Bonjour Esther Michel,")
    assert "Option de formation : Weekend" in student["text"]


def test_no_student_email_only_notifies_admins(client, outbox):
    assert register(client, email="").status_code == 200
    assert len(outbox) == 1
    assert "Email : non fourni" in outbox[0]["text"]


def test_no_admin_list_only_acknowledges(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", [])
    assert register(client).status_code == 200
    assert [m["to"] for m in outbox] == [["esther@example.com"]]


def test_mail_failure_does_not_block_registration(client, db, monkeypatch, outbox):
    calls = []

    def broken_send(params, *args, **kwargs):
        calls.append(params["to"])
        raise RuntimeError("Resend unavailable")

    monkeypatch.setattr(resend.Emails, "send", broken_send)

    res = register(client)
    assert res.status_code == 200
    assert res.json()["status"] == "success"
    assert db.query(Inscription).filter(Inscription.id == res.json()["id"]).count() == 1
    # both messages were attempted
    assert len(calls) == 2


def test_no_api_key_skips_sending(client, outbox, monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "")
    assert register(client).status_code == 200
    assert outbox == []


def test_duplicate_registration_sends_nothing(client, outbox):
    register(client)
    outbox.clear()
    assert register(client).status_code == 409
    assert outbox == []
