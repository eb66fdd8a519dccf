import csv
from io import StringIO

from conftest import register
from quizcraft.db.models.result import Result
from quizcraft.services.export.csv_export import (
    FIELDNAMES,
    format_answers_field,
    parse_answers_field,
)


def _take(client, quiz_id, name, selections):
    aid = client.post(
        f"/api/quizzes/{quiz_id}/attempts", json={"participant_name": name}
    ).get_json()["id"]
    for q, o in selections:
        client.post(f"/api/attempts/{aid}/answers", json={"question_index": q, "option_index": o})
    return client.post(f"/api/attempts/{aid}/submit").get_json()


def test_answers_field_format():
    assert format_answers_field([[0], [2, 1], []]) == "0|1;2|"
    assert parse_answers_field("0|1;2|") == [[0], [1, 2], []]
    assert parse_answers_field("") == [[]]


def test_results_list_and_summary(client, clock, owner, created_quiz):
    headers, _ = owner
    quiz_id = created_quiz["id"]
    _take(client, quiz_id, "Ann", [(0, 0), (1, 0), (1, 2)])
    _take(client, quiz_id, "Bob", [(0, 1)])

    r = client.get(f"/api/quizzes/{quiz_id}/results", headers=headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["summary"] == {"count": 2, "average_percentage": 50.0, "best_score": 2}
    assert {res["participant_name"] for res in body["results"]} == {"Ann", "Bob"}


def test_results_owner_only(client, clock, created_quiz):
    other, _ = register(client, "other@quiz.local")
    assert client.get(f"/api/quizzes/{created_quiz['id']}/results", headers=other).status_code == 403
    assert client.get(f"/api/quizzes/{created_quiz['id']}/results").status_code == 401


def test_csv_export_rows_roundtrip(client, clock, owner, created_quiz):
    headers, _ = owner
    quiz_id = created_quiz["id"]
    taken = {
        "Ann": [[0], [0, 2]],
        "Bob": [[1], []],
        "Cy":  [[], [1]],
    }
    for name, answers in taken.items():
        selections = [(q, o) for q, opts in enumerate(answers) for o in opts]
        _take(client, quiz_id, name, selections)

    r = client.get(f"/api/quizzes/{quiz_id}/results.csv", headers=headers)
    assert r.status_code == 200
    assert r.headers["Content-Type"].startswith("text/csv")
    assert "attachment" in r.headers["Content-Disposition"]

    rows = list(csv.DictReader(StringIO(r.get_data(as_text=True))))
    assert len(rows) == len(taken)
    assert list(rows[0].keys()) == FIELDNAMES
    for row in rows:
        assert parse_answers_field(row["answers"]) == taken[row["participant"]]
    scores = {row["participant"]: int(row["score"]) for row in rows}
    assert scores == {"Ann": 2, "Bob": 0, "Cy": 0}


def test_result_review(client, clock, created_quiz):
    result_id = _take(client, created_quiz["id"], "Ann", [(0, 1), (1, 0), (1, 2)])["result_id"]
    r = client.get(f"/api/results/{result_id}")
    assert r.status_code == 200
    body = r.get_json()
    assert body["score"] == 1 and body["percentage"] == 50
    assert body["review"][0]["is_correct"] is False
    assert body["review"][0]["correct"] == [0]
    assert body["review"][0]["selected"] == [1]
    assert body["review"][1]["is_correct"] is True


def test_results_survive_quiz_deletion(client, clock, owner, created_quiz):
    headers, _ = owner
    result_id = _take(client, created_quiz["id"], "Ann", [(0, 0)])["result_id"]
    client.delete(f"/api/quizzes/{created_quiz['id']}", headers=headers)

    body = client.get(f"/api/results/{result_id}").get_json()
    assert body["quiz_id"] is None
    assert body["quiz_title"] == "Capitals"
    assert body["review"][0]["text"] == "Capital of France?"


def test_percentage_rounds_halves_up():
    assert Result(score=1, total=8).percentage == 13
    assert Result(score=5, total=8).percentage == 63
    assert Result(score=1, total=3).percentage == 33
    assert Result(score=2, total=3).percentage == 67
    assert Result(score=0, total=0).percentage == 0
