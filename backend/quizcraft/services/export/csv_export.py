"""
CSV export of quiz results.

One row per result. The ``answers`` column packs the per-question selections
into a single cell: option indexes joined by ``;``, questions joined by
``|``. ``"0|1;2|"`` reads as Q1 → {0}, Q2 → {1, 2}, Q3 → nothing selected.
"""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable, List

from quizcraft.db.models.result import Result

FIELDNAMES = ["participant", "score", "total", "percentage", "submitted_at", "answers"]


def format_answers_field(answers: Iterable[Iterable[int]]) -> str:
    return "|".join(";".join(str(i) for i in sorted(selected)) for selected in answers)


def parse_answers_field(field: str) -> List[List[int]]:
    # every quiz has at least one question, so "" is one empty selection
    return [[int(i) for i in part.split(";") if i] for part in field.split("|")]


def results_to_csv(results: Iterable[Result]) -> str:
    si = StringIO()
    writer = csv.DictWriter(si, fieldnames=FIELDNAMES)
    writer.writeheader()
    for r in results:
        writer.writerow(
            {
                "participant":  r.participant_name,
                "score":        r.score,
                "total":        r.total,
                "percentage":   r.percentage,
                "submitted_at": r.submitted_at.isoformat(),
                "answers":      format_answers_field(r.answers),
            }
        )
    return si.getvalue()
