from conftest import register


def test_profile_counts_and_badges(client, clock, owner, created_quiz):
    headers, user = owner
    aid = client.post(
        f"/api/quizzes/{created_quiz['id']}/attempts", json={}, headers=headers
    ).get_json()["id"]
    client.post(f"/api/attempts/{aid}/answers", json={"question_index": 0, "option_index": 0})
    client.post(f"/api/attempts/{aid}/answers", json={"question_index": 1, "option_index": 0})
    client.post(f"/api/attempts/{aid}/answers", json={"question_index": 1, "option_index": 2})
    client.post(f"/api/attempts/{aid}/submit")

    r = client.get(f"/api/users/{user['id']}", headers=headers)
    assert r.status_code == 200
    profile = r.get_json()
    assert profile["is_own"] is True
    assert profile["stats"]["quizzes_created"] == 1
    assert profile["stats"]["quizzes_taken"] == 1
    assert profile["stats"]["total_score"] == 2
    slugs = {b["slug"] for b in profile["badges"]}
    assert {"first_quiz", "first_attempt", "perfectionist"} <= slugs
    assert "quiz_maker" not in slugs


def test_me_alias(client, owner):
    headers, user = owner
    assert client.get("/api/users/me", headers=headers).get_json()["id"] == user["id"]


def test_unknown_user(client):
    assert client.get("/api/users/nobody").status_code == 404


def test_update_profile(client, owner):
    headers, _ = owner
    r = client.patch("/api/users/me", json={"display_name": "  Quiz Boss ", "bio": "hi"}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()["display_name"] == "Quiz Boss"
    assert r.get_json()["bio"] == "hi"

    r = client.patch("/api/users/me", json={"display_name": "x" * 101}, headers=headers)
    assert r.status_code == 400


def test_follow_unfollow_is_idempotent(client, owner):
    headers, user = owner
    fan, fan_user = register(client, "fan@quiz.local")

    for _ in range(2):
        r = client.post(f"/api/users/{user['id']}/follow", headers=fan)
        assert r.status_code == 200
    profile = r.get_json()
    assert profile["is_following"] is True
    assert profile["stats"]["followers"] == 1

    fan_profile = client.get(f"/api/users/{fan_user['id']}").get_json()
    assert fan_profile["stats"]["following"] == 1

    for _ in range(2):
        r = client.delete(f"/api/users/{user['id']}/follow", headers=fan)
        assert r.status_code == 200
    assert r.get_json()["is_following"] is False
    assert r.get_json()["stats"]["followers"] == 0


def test_cannot_follow_self(client, owner):
    headers, user = owner
    assert client.post(f"/api/users/{user['id']}/follow", headers=headers).status_code == 400


def test_user_quizzes_public_view(client, owner, created_quiz):
    _, user = owner
    listed = client.get(f"/api/users/{user['id']}/quizzes").get_json()
    assert [q["id"] for q in listed] == [created_quiz["id"]]
    assert "isCorrect" not in listed[0]["questions"][0]["options"][0]


def test_my_results(client, clock, owner, created_quiz):
    headers, _ = owner
    aid = client.post(
        f"/api/quizzes/{created_quiz['id']}/attempts", json={}, headers=headers
    ).get_json()["id"]
    client.post(f"/api/attempts/{aid}/submit")
    results = client.get("/api/users/me/results", headers=headers).get_json()
    assert len(results) == 1
    assert results[0]["quiz_title"] == "Capitals"
