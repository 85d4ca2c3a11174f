import logging

from main import run_migrations


def test_migrations_keep_app_logging():
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)

    run_migrations()

    assert root.level == level
    assert root.handlers == handlers
    assert logging.getLogger("apps.bookings.services").disabled is False


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
