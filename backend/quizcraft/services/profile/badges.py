"""
Profile badges, derived from activity counts. Nothing is stored: a badge is
earned as soon as its threshold is met and shown on every profile read.
"""

from __future__ import annotations

from typing import List

# (slug, label, stat key, threshold)
_BADGES = [
    ("first_quiz",    "First Quiz",    "quizzes_created", 1),
    ("quiz_maker",    "Quiz Maker",    "quizzes_created", 5),
    ("quiz_master",   "Quiz Master",   "quizzes_created", 20),
    ("first_attempt", "First Attempt", "quizzes_taken",   1),
    ("regular",       "Regular",       "quizzes_taken",   10),
    ("perfectionist", "Perfectionist", "perfect_scores",  1),
    ("popular",       "Popular",       "followers",       10),
]


def earned_badges(stats: dict) -> List[dict]:
    return [
        {"slug": slug, "label": label}
        for slug, label, key, threshold in _BADGES
        if stats.get(key, 0) >= threshold
    ]
