"""
Registration e-mails sent through Resend: a notice to the admin inbox and an
acknowledgment to the student. Sending never blocks a registration, failures
are only logged.
"""
import logging
from typing import List, Optional

import resend

from config import settings
from services.labels import programme_label

logger = logging.getLogger(__name__)

STUDENT_SUBJECT = "Nous avons bien reçu votre inscription - Kisa Beauty School"

STUDENT_BODY = """Bonjour {nom},

Nous avons bien reçu votre inscription à Kisa Beauty School.

Programmes / spécialités : {specialites}
Option de formation : {option}

Notre équipe va vous contacter très bientôt pour la suite :
- Informations sur le début des cours
- Détails de paiement
- Organisation pratique

Adresse : Rue des Marthys, Ouanaminthe, Haïti
WhatsApp : +509 4116-3845 / +509 3823-5518

"Kisa un jour, Kisa toujours"

Kisa Beauty School"""

ADMIN_BODY = """Une nouvelle inscription a été reçue sur le site Kisa Beauty School :

Nom : {nom}
Email : {email}
Téléphone : {telephone}

Programmes / spécialités : {specialites}
Option de formation : {option}

Connecte-toi dans l'espace admin pour voir plus de détails."""


def option_label(programme: Optional[str]) -> str:
    value = (programme or "").strip().lower()
    if value == "semaine":
        return "Semaine"
    if value == "weekend":
        return "Weekend"
    return value or "Non précisé"


def specialites_label(specialites: Optional[List[str]]) -> str:
    labels = [programme_label(s) for s in (specialites or []) if s]
    return ", ".join(labels) if labels else "Non spécifiées"


def admin_message(nom, email, telephone, specialites, programme) -> dict:
    specs = specialites_label(specialites)
    option = option_label(programme)
    return {
        "from": settings.EMAIL_FROM,
        "to": list(settings.ADMIN_EMAILS),
        "subject": f"Nouvelle inscription - {specs} / {option}",
        "text": ADMIN_BODY.format(
            nom=nom,
            email=email or "non fourni",
            telephone=telephone or "non fourni",
            specialites=specs,
            option=option,
        ),
    }


def student_message(nom, email, specialites, programme) -> dict:
    return {
        "from": settings.EMAIL_FROM,
        "to": [email],
        "subject": STUDENT_SUBJECT,
        "text": STUDENT_BODY.format(
            nom=nom,
            specialites=specialites_label(specialites),
            option=option_label(programme),
        ),
    }


def _send(message: dict) -> bool:
    try:
        resend.Emails.send(message)
    except Exception:
        logger.exception("E-mail to %s failed", ", ".join(message["to"]))
        return False
    logger.info("E-mail sent to %s: %s", ", ".join(message["to"]), message["subject"])
    return True


def send_inscription_emails(
    nom: str,
    email: Optional[str],
    telephone: Optional[str],
    specialites: Optional[List[str]],
    programme: Optional[str],
) -> int:
    """Admin notice + student acknowledgment, returns how many went out"""
    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY not set, registration e-mails skipped")
        return 0
    resend.api_key = settings.RESEND_API_KEY

    sent = 0
    if settings.ADMIN_EMAILS:
        sent += _send(admin_message(nom, email, telephone, specialites, programme))
    else:
        logger.warning("No ADMIN_EMAILS configured, admin notice skipped")

    if email:
        sent += _send(student_message(nom, email, specialites, programme))
    else:
        logger.info("No student e-mail for %s, acknowledgment skipped", nom)
    return sent
