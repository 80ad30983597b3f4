"""
Payment-period reconciliation
Programme classification, month ranges and the paid / not-paid status of a
student over a range of months. Everything here is pure: it works on rows
already loaded and validated by the routers.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from schemas.paiements import CategoryRow, CategoryView, PaymentRecord
from schemas.students import StudentRecord

# =====================
# CONSTANTS
# =====================

PROGRAMME_KEYS = ["maquillage", "cosmetologie", "decoration"]

# Substring identifying each programme inside a free-text label
PROGRAMME_TOKENS = {
    "maquillage": "maquill",
    "cosmetologie": "cosm",
    "decoration": "dec",
}

PROGRAMME_TITLES = {
    "maquillage": "Maquillage",
    "cosmetologie": "Cosmétologie",
    "decoration": "Décoration",
}

PAID = "paye"
UNPAID = "non_paye"

STATUS_PAID = "Payé"
STATUS_UNPAID = "Non payé"
NO_STATUS = "-"

MONTH_SHORT = {
    "01": "Jan", "02": "Fév", "03": "Mar", "04": "Avr", "05": "Mai", "06": "Juin",
    "07": "Juil", "08": "Août", "09": "Sep", "10": "Oct", "11": "Nov", "12": "Déc",
}


# =====================
# HELPERS
# =====================

def month_short(mois: str) -> str:
    return MONTH_SHORT.get(mois, mois)


def statut_label(statut: Optional[str]) -> str:
    if statut == PAID:
        return STATUS_PAID
    if statut == UNPAID:
        return STATUS_UNPAID
    return ""


def programme_match(programme: Optional[str], key: str) -> bool:
    """Case-insensitive substring match of a programme label against a category key"""
    if not programme:
        return False
    token = PROGRAMME_TOKENS.get(key)
    if token is None:
        return False
    return token in programme.lower()


def classify_programme(programme: Optional[str]) -> Optional[str]:
    """Category key of a label, first match wins; None when nothing matches"""
    for key in PROGRAMME_KEYS:
        if programme_match(programme, key):
            return key
    return None


def _month_number(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def months_in_range(start, end) -> List[str]:
    """
    Month codes between start and end, inclusive, always ascending.
    "06" -> "01" gives ["01", ..., "06"]. Anything that is not a month 1..12
    gives an empty list.
    """
    s = _month_number(start)
    e = _month_number(end)
    if s is None or e is None:
        return []
    if not (1 <= s <= 12 and 1 <= e <= 12):
        return []

    if s > e:
        s, e = e, s

    return [str(m).zfill(2) for m in range(s, e + 1)]


def payments_in_range(payments: Iterable[PaymentRecord], months_range: Sequence[str]) -> List[PaymentRecord]:
    """Keep records whose month falls inside the range (numeric comparison)"""
    if not months_range:
        return []
    low = int(months_range[0])
    high = int(months_range[-1])

    result = []
    for p in payments:
        m = _month_number(p.mois)
        if m is not None and low <= m <= high:
            result.append(p)
    return result


def reconcile(payments: Iterable[PaymentRecord], months_range: Sequence[str]) -> str:
    """
    One status for a student over a period.
    A single unpaid month in the range makes the whole period "Non payé".
    One "paye" record is enough for a month, other records for it are ignored.
    """
    if not months_range:
        return NO_STATUS

    paid_months = {p.mois for p in payments if p.statut == PAID}

    for m in months_range:
        if m not in paid_months:
            return STATUS_UNPAID

    return STATUS_PAID


def paid_months_label(payments: Iterable[PaymentRecord]) -> str:
    unique_paid = sorted({p.mois for p in payments if p.statut == PAID})
    if not unique_paid:
        return NO_STATUS
    return " - ".join(month_short(m) for m in unique_paid)


def status_matches(label: str, status_filter: str) -> bool:
    # Exact label comparison: the "-" placeholder only shows under "all"
    if status_filter == PAID:
        return label == STATUS_PAID
    if status_filter == UNPAID:
        return label == STATUS_UNPAID
    return True


# =====================
# CATEGORY VIEWS
# =====================

def group_payments(payments: Iterable[PaymentRecord]) -> Dict[int, List[PaymentRecord]]:
    grouped = defaultdict(list)
    for p in payments:
        grouped[p.etudiant_id].append(p)
    return grouped


def compose_category_rows(
    students: Sequence[StudentRecord],
    payments: Iterable[PaymentRecord],
    key: str,
    view: CategoryView,
) -> List[CategoryRow]:
    """
    Rows of one programme table. Student order is kept as given
    (the routers load students sorted by name).
    """
    months_range = months_in_range(view.start, view.end)
    by_student = group_payments(payments)

    rows = []
    for etu in students:
        if not programme_match(etu.programme, key):
            continue
        if view.etudiante_id is not None and etu.id != view.etudiante_id:
            continue

        in_range = payments_in_range(by_student.get(etu.id, []), months_range)
        label = reconcile(in_range, months_range)
        if not status_matches(label, view.statut):
            continue

        rows.append(CategoryRow(
            etudiant=etu,
            mois_label=paid_months_label(in_range),
            statut_label=label,
        ))
    return rows
