from app import crud
from tests.utils import runner


def seed(db, event_id, records):
    result = crud.participant.bulk_insert(db, event_id=event_id, records=records)
    assert result.inserted == len(records)


def test_search_matches_case_insensitive_substrings(db, event):
    seed(db, event.id, [
        runner(101, "Lan", "Nguyen", email="lan@example.com"),
        runner(102, "Minh", "Tran", phone="0901234567"),
        runner(203, "Hoa", "Le", id_card_passport="B7654321"),
    ])

    assert [p.bib_no for p in crud.participant.search(db, event_id=event.id, query="nguy")] == ["101"]
    assert [p.bib_no for p in crud.participant.search(db, event_id=event.id, query="LAN@EXAMPLE")] == ["101"]
    assert [p.bib_no for p in crud.participant.search(db, event_id=event.id, query="12345")] == ["102"]
    assert [p.bib_no for p in crud.participant.search(db, event_id=event.id, query="b7654")] == ["203"]
    assert sorted(p.bib_no for p in crud.participant.search(db, event_id=event.id, query="10")) == ["101", "102"]


def test_search_orders_by_last_then_first_name(db, event):
    seed(db, event.id, [
        runner(1, "Zed", "Brown"),
        runner(2, "Amy", "Clark"),
        runner(3, "Bob", "Adams"),
        runner(4, "Abe", "Brown"),
    ])

    results = crud.participant.search(db, event_id=event.id, query="")

    assert [(p.last_name, p.first_name) for p in results] == [
        ("Adams", "Bob"), ("Brown", "Abe"), ("Brown", "Zed"), ("Clark", "Amy"),
    ]


def test_search_is_capped_and_repeatable(db, event):
    seed(db, event.id, [runner(n, f"Runner{n:02d}", "Same") for n in range(25)])

    first = crud.participant.search(db, event_id=event.id, query="runner")
    second = crud.participant.search(db, event_id=event.id, query="runner")

    assert len(first) == 20
    assert [p.id for p in first] == [p.id for p in second]


def test_search_wildcards_are_literal(db, event):
    seed(db, event.id, [runner(1, "Ann", "Smith"), runner(2, "Bo", "100%")])

    assert [p.bib_no for p in crud.participant.search(db, event_id=event.id, query="%")] == ["2"]
    assert crud.participant.search(db, event_id=event.id, query="_") == []


def test_search_stays_inside_the_event(db, event, other_event):
    seed(db, event.id, [runner(1, "Lan", "Nguyen")])
    seed(db, other_event.id, [runner(1, "Lan", "Nguyen")])

    results = crud.participant.search(db, event_id=event.id, query="lan")

    assert len(results) == 1
    assert results[0].event_id == event.id


def test_get_in_event_hides_other_events_participants(db, event, other_event):
    seed(db, other_event.id, [runner(9)])
    foreign = crud.participant.get_by_bib(db, event_id=other_event.id, bib_no="9")

    assert crud.participant.get_in_event(db, id=foreign.id, event_id=event.id) is None
    assert crud.participant.get_in_event(db, id=foreign.id, event_id=other_event.id).id == foreign.id


def test_get_by_bib(db, event):
    seed(db, event.id, [runner(55, "Lan", "Nguyen")])

    assert crud.participant.get_by_bib(db, event_id=event.id, bib_no="55").first_name == "Lan"
    assert crud.participant.get_by_bib(db, event_id=event.id, bib_no="56") is None


def test_participant_count_is_derived(db, event, user):
    seed(db, event.id, [runner(n) for n in range(3)])

    [listed] = crud.event.get_by_owner(db, owner_id=user.id)

    assert listed.participant_count == 3


def test_participant_search_endpoint(client, db, event, auth_headers):
    seed(db, event.id, [runner(101, "Lan", "Nguyen"), runner(102, "Minh", "Tran")])

    response = client.get(
        "/api/participants/search", params={"q": "tran", "event_id": event.id}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert [p["bib_no"] for p in body] == ["102"]
    assert set(body[0]) == {"id", "bib_no", "first_name", "last_name", "phone", "email", "checkin_at", "checkin_by"}


def test_participant_detail_endpoints(client, db, event, other_event, auth_headers):
    seed(db, event.id, [runner(101, "Lan", "Nguyen", tshirt_size="M")])
    seed(db, other_event.id, [runner(5)])
    own = crud.participant.get_by_bib(db, event_id=event.id, bib_no="101")
    foreign = crud.participant.get_by_bib(db, event_id=other_event.id, bib_no="5")

    by_bib = client.get("/api/participants/bib/101", params={"event_id": event.id}, headers=auth_headers)
    by_id = client.get(f"/api/participants/{own.id}", params={"event_id": event.id}, headers=auth_headers)
    missing = client.get(f"/api/participants/{foreign.id}", params={"event_id": event.id}, headers=auth_headers)
    other = client.get("/api/participants/bib/5", params={"event_id": other_event.id}, headers=auth_headers)

    assert by_bib.status_code == 200
    assert by_bib.json()["tshirt_size"] == "M"
    assert by_bib.json()["signature"] is None
    assert by_id.json()["id"] == own.id
    assert missing.status_code == 404
    assert missing.json() == {"error": "Participant not found"}
    assert other.status_code == 404
    assert other.json() == {"error": "Event not found"}


def test_get_by_bib_returns_earliest_row_for_shared_bib(db, event):
    seed(db, event.id, [runner(8, "First"), runner(8, "Second"), runner("", "NoBib"), runner("", "AlsoNoBib")])

    assert crud.participant.get_by_bib(db, event_id=event.id, bib_no="8").first_name == "First"
    assert crud.participant.count_for_event(db, event_id=event.id) == 4
