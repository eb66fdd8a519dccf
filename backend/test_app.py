from quizcraft import create_app
from quizcraft.extensions import db


def test_app_factory_builds_more_than_once():
    create_app("testing")
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        assert db.session.execute(db.text("SELECT 1")).scalar() == 1
        db.drop_all()


def test_unknown_route_is_json(client):
    r = client.get("/api/nowhere")
    assert r.status_code == 404
    assert r.get_json() == {"error": "not found"}
