"""
CSV exports (category payment tables, students, inscriptions)
"""
import csv
from typing import List, Sequence

import pandas as pd

from schemas.inscriptions import InscriptionRecord
from schemas.paiements import CategoryRow
from schemas.students import StudentRecord
from services.labels import (
    fr_date, fr_datetime, groupe_label, student_programme_label, student_statut_label,
)
from services.paiements import months_in_range

CATEGORY_COLUMNS = ["Nom", "Groupe", "Mois payés", "Status"]
STUDENT_COLUMNS = ["Date", "Nom", "Email", "Téléphone", "Naissance", "Programme", "Groupe", "Statut"]
INSCRIPTION_COLUMNS = ["Date", "Nom", "Email", "Téléphone", "Date de naissance"]


def _no_comma(value) -> str:
    return str(value if value is not None else "").replace(",", " ")


def category_csv(rows: Sequence[CategoryRow]) -> str:
    data = [
        [
            _no_comma(row.etudiant.nom),
            _no_comma(row.etudiant.groupe),
            _no_comma(row.mois_label),
            _no_comma(row.statut_label),
        ]
        for row in rows
    ]
    df = pd.DataFrame(data, columns=CATEGORY_COLUMNS)
    return df.to_csv(index=False, lineterminator="\n")


def category_csv_filename(key: str, start: str, end: str) -> str:
    # normalised bounds, raw values only when the range is invalid
    months = months_in_range(start, end)
    if months:
        start, end = months[0], months[-1]
    return f"paiements_{key}_{start}-{end}.csv"


def students_csv(students: Sequence[StudentRecord]) -> str:
    data: List[list] = [
        [
            fr_datetime(s.created_at),
            s.nom or "",
            s.email or "",
            s.telephone or "",
            fr_date(s.date_naissance),
            student_programme_label(s.programme, s.specialites).replace("—", ""),
            groupe_label(s.groupe).replace("—", ""),
            student_statut_label(s.statut),
        ]
        for s in students
    ]
    df = pd.DataFrame(data, columns=STUDENT_COLUMNS)
    # BOM so that Excel opens the accents correctly
    return "\ufeff" + df.to_csv(index=False, sep=";", lineterminator="\n")


def inscriptions_csv(inscriptions: Sequence[InscriptionRecord]) -> str:
    data = [
        [
            fr_datetime(i.created_at),
            i.nom or "",
            i.email or "",
            i.telephone or "",
            fr_date(i.date_naissance),
        ]
        for i in inscriptions
    ]
    df = pd.DataFrame(data, columns=INSCRIPTION_COLUMNS)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
