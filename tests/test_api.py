from fastapi.testclient import TestClient

from app import crud
from app.main import create_app
from app.models.event import Event
from app.schemas.participant import ROSTER_COLUMNS
from tests.utils import roster_csv


def create_event(client, headers, name="City Marathon", start="2026-11-01", roster=None, filename="roster.csv"):
    files = {"participants_file": (filename, roster, "text/csv")} if roster is not None else None
    return client.post(
        "/api/events",
        data={"event_name": name, "event_start_date": start},
        files=files,
        headers=headers,
    )


def test_login_returns_token_and_public_user(client, user):
    response = client.post("/api/auth/login", json={"user_name": "organizer", "password": "s3cret-pass"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["user_name"] == "organizer"
    assert "hashed_password" not in body["user"]

    verify = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {body['token']}"})
    assert verify.json() == {"valid": True, "user_id": user.id, "user_name": "organizer"}


def test_login_failure_does_not_reveal_which_part_was_wrong(client, user):
    wrong_password = client.post("/api/auth/login", json={"user_name": "organizer", "password": "nope"})
    unknown_user = client.post("/api/auth/login", json={"user_name": "ghost", "password": "s3cret-pass"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {
        "success": False, "error": "Invalid username or password",
    }


def test_verify_without_token_is_invalid(client):
    assert client.get("/api/auth/verify").json()["valid"] is False


def test_protected_routes_require_a_token(client, event):
    assert client.get("/api/events").status_code == 401
    assert client.get("/api/stats", params={"event_id": event.id}).status_code == 401
    response = client.get("/api/events", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"error": "Could not validate credentials"}


def test_create_event_without_roster(client, auth_headers):
    response = create_event(client, auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Event created successfully"
    assert body["insertedCount"] == 0


def test_create_event_with_roster(client, db, auth_headers):
    roster = roster_csv([{"bib_no": str(n), "first_name": f"R{n}"} for n in range(1, 4)])

    response = create_event(client, auth_headers, roster=roster)

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Event created with participants imported successfully"
    assert body["insertedCount"] == 3
    assert crud.participant.count_for_event(db, event_id=body["eventId"]) == 3


def test_create_event_keeps_rows_without_unique_bibs(client, auth_headers):
    roster = roster_csv([{"bib_no": "1", "first_name": "A"}, {"bib_no": "1", "first_name": "B"}, {"first_name": "C"}])

    body = create_event(client, auth_headers, roster=roster).json()

    assert body["success"] is True
    assert body["message"] == "Event created with participants imported successfully"
    assert body["insertedCount"] == 3
    assert body["errors"] == []


def test_invalid_roster_creates_nothing(client, db, auth_headers):
    columns = tuple(c for c in ROSTER_COLUMNS if c != "bib_no")
    roster = roster_csv([{"first_name": "A"}], columns=columns)

    response = create_event(client, auth_headers, roster=roster)

    assert response.status_code == 400
    assert response.json() == {"error": "Roster validation failed: Missing required columns: bib_no"}
    assert db.query(Event).count() == 0


def test_unsupported_roster_type_is_rejected(client, db, auth_headers):
    response = create_event(client, auth_headers, roster=b"a,b", filename="roster.pdf")

    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["error"]
    assert db.query(Event).count() == 0


def test_create_event_validates_form_fields(client, auth_headers):
    assert create_event(client, auth_headers, name="   ").status_code == 400
    bad_date = create_event(client, auth_headers, start="next tuesday")
    assert bad_date.status_code == 400
    assert "event_start_date" in bad_date.json()["error"]


def test_list_events_only_shows_own_events(client, auth_headers, event, other_event):
    create_event(client, auth_headers, name="Later Race", start="2027-01-15")

    response = client.get("/api/events", headers=auth_headers)

    assert response.status_code == 200
    names = [e["event_name"] for e in response.json()]
    assert names == ["Later Race", "City Marathon"]


def test_get_event_of_another_user_is_not_found(client, auth_headers, event, other_event):
    own = client.get(f"/api/events/{event.id}", headers=auth_headers)
    foreign = client.get(f"/api/events/{other_event.id}", headers=auth_headers)

    assert own.status_code == 200
    assert own.json()["participant_count"] == 0
    assert foreign.status_code == 404
    assert foreign.json() == {"error": "Event not found"}


def test_preflight_requests_succeed_without_auth(client):
    response = client.options(
        "/api/events",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


def test_unknown_route_returns_json_error(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert "error" in response.json()


def test_cors_header_on_regular_responses(client, auth_headers):
    response = client.get("/api/events", headers={**auth_headers, "Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "*"
    assert "x-process-time" in response.headers


def test_unhandled_errors_return_generic_500(db, image_store):
    app = create_app(image_store=image_store)

    @app.get("/api/explode")
    def explode():
        raise RuntimeError("connection string with password=hunter2")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/api/explode")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "hunter2" not in response.text
    assert response.headers["access-control-allow-origin"] == "*"
