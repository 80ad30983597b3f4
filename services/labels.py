"""
Display helpers shared by the admin lists and exports:
programme / groupe / statut labels, French dates, accent-insensitive search, slugs.
"""
import re
import unicodedata
from datetime import date, datetime
from typing import List, Optional, Union

PROGRAMME_LABELS = {
    "maquillage": "Maquillage",
    "cosmetologie": "Cosmétologie",
    "decoration": "Décoration",
    "style-crochet": "Style crochet",
}

FR_DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def strip_accents(value: Optional[str]) -> str:
    """Lower-case without diacritics, used for searching"""
    decomposed = unicodedata.normalize("NFD", value or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def programme_label(value: Optional[str]) -> str:
    v = (value or "").lower()
    if v in PROGRAMME_LABELS:
        return PROGRAMME_LABELS[v]
    return v[:1].upper() + v[1:] if v else ""


def student_programme_label(programme: Optional[str], specialites: Optional[List[str]]) -> str:
    # programme first, first specialite as fallback
    first = specialites[0] if specialites else ""
    return programme_label(programme or first) or "—"


def groupe_key(groupe: Union[int, str, None]) -> Optional[str]:
    """Normalise the track code: "semaine" / "1" -> semaine, "weekend" / "2" -> weekend"""
    if groupe is None:
        return None
    if isinstance(groupe, int):
        return "weekend" if groupe == 2 else "semaine"
    v = groupe.strip().lower()
    if not v:
        return None
    if v.isdigit():
        return "weekend" if int(v) == 2 else "semaine"
    return "weekend" if "week" in v else "semaine"


def groupe_label(groupe: Union[int, str, None]) -> str:
    key = groupe_key(groupe)
    if key is None:
        return "—"
    return "Weekend" if key == "weekend" else "Semaine"


def student_statut_label(statut: Optional[str]) -> str:
    return "Archivé" if (statut or "actif").lower() == "archive" else "Actif"


def horaire_label(programme: Optional[str]) -> str:
    return "Weekend" if (programme or "semaine").lower() == "weekend" else "Semaine"


def inscription_programme_label(specialites: Optional[List[str]], programme: Optional[str]) -> str:
    """ "Maquillage / Weekend" """
    horaire = horaire_label(programme)
    spec = programme_label(specialites[0]) if specialites else ""
    return f"{spec} / {horaire}" if spec else horaire


def iso_from_fr(value: str) -> Optional[date]:
    """Parse "JJ/MM/AAAA", None when the date does not exist"""
    m = FR_DATE_RE.match((value or "").strip())
    if not m:
        return None
    dd, mm, yyyy = (int(x) for x in m.groups())
    if yyyy < 1900:
        return None
    try:
        return date(yyyy, mm, dd)
    except ValueError:
        return None


def fr_date(value: Optional[date]) -> str:
    if not value:
        return ""
    return value.strftime("%d/%m/%Y")


def fr_datetime(value: Optional[datetime]) -> str:
    if not value:
        return ""
    return value.strftime("%d/%m/%Y %H:%M:%S")


def to_slug(value: str) -> str:
    s = strip_accents(value)
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


def excerpt(content: str, length: int = 180) -> str:
    text = " ".join((content or "").split())
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "…"
