from datetime import datetime, timedelta

from helpers import DAY, at


def create(client, room_id=4, start=10, end=12, title="Design review", **extra):
    payload = {
        "room_id": room_id,
        "title": title,
        "start_time": at(start).isoformat(),
        "end_time": at(end).isoformat(),
        **extra,
    }
    return client.post("/v1/reservations", json=payload)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_and_get_rooms(seeded_client):
    rooms = seeded_client.get("/v1/rooms").json()

    assert len(rooms) == 4
    assert rooms[1]["name"] == "Brainstorm Room"
    assert seeded_client.get("/v1/rooms/3").json()["capacity"] == 30
    assert seeded_client.get("/v1/rooms/99").status_code == 404


def test_list_rooms_with_filters(seeded_client):
    rooms = seeded_client.get("/v1/rooms", params={"feature": "Whiteboard", "max_capacity": 6}).json()

    assert [r["name"] for r in rooms] == ["Brainstorm Room", "Focus Room"]


def test_room_crud(client):
    created = client.post("/v1/rooms", json={
        "name": "Library Nook", "capacity": 3, "location": "Building D", "features": ["Whiteboard"],
    })
    assert created.status_code == 201
    room_id = created.json()["id"]

    updated = client.patch(f"/v1/rooms/{room_id}", json={"is_available": False})
    assert updated.json()["is_available"] is False
    assert updated.json()["features"] == ["Whiteboard"]

    assert client.delete(f"/v1/rooms/{room_id}").status_code == 204
    assert client.get(f"/v1/rooms/{room_id}").status_code == 404


def test_create_room_requires_positive_capacity(client):
    response = client.post("/v1/rooms", json={"name": "Broom closet", "capacity": 0, "location": "B"})

    assert response.status_code == 422


def test_update_unknown_room_is_not_found(seeded_client):
    response = seeded_client.patch("/v1/rooms/99", json={"name": "Ghost"})

    assert response.status_code == 404
    assert response.json()["detail"] == "room 99 not found"
    assert len(seeded_client.get("/v1/rooms").json()) == 4


def test_delete_room_in_use_is_a_conflict(seeded_client):
    response = seeded_client.delete("/v1/rooms/1")

    assert response.status_code == 409
    assert seeded_client.get("/v1/rooms/1").status_code == 200


def test_create_then_list_reservations(seeded_client):
    before = datetime.now()

    response = create(seeded_client)

    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "pending"
    assert created["user_id"] == "user1"
    assert datetime.fromisoformat(created["created_at"]) >= before
    listed = seeded_client.get("/v1/reservations").json()
    assert created["id"] in [r["id"] for r in listed]
    assert created["id"] not in (1, 2, 3)


def test_create_reservation_errors(seeded_client):
    assert create(seeded_client, start=12, end=10).status_code == 400
    assert create(seeded_client, room_id=99).status_code == 404
    assert create(seeded_client, title="ab").status_code == 400


def test_list_reservations_by_room_and_status(seeded_client):
    create(seeded_client, room_id=1, start=14, end=15)

    for_room = seeded_client.get("/v1/rooms/1/reservations").json()
    pending = seeded_client.get("/v1/reservations", params={"status": "pending"}).json()

    assert [r["title"] for r in for_room] == ["Executive Meeting", "Design review"]
    assert [r["title"] for r in pending] == ["Design review"]


def test_approve_reject_and_cancel_flow(seeded_client):
    first = create(seeded_client, start=9, end=10).json()
    second = create(seeded_client, start=9, end=10, title="Clashing call").json()

    approved = seeded_client.post(f"/v1/reservations/{first['id']}/approve", json={"admin_notes": "ok"})
    clash = seeded_client.post(f"/v1/reservations/{second['id']}/approve")
    rejected = seeded_client.post(f"/v1/reservations/{second['id']}/reject")

    assert approved.json()["status"] == "confirmed"
    assert approved.json()["admin_notes"] == "ok"
    assert clash.status_code == 409
    assert rejected.json()["status"] == "rejected"

    cancel = seeded_client.post(f"/v1/reservations/{first['id']}/cancel")
    again = seeded_client.post(f"/v1/reservations/{first['id']}/cancel")
    assert cancel.json() == {"id": first["id"], "status": "cancelled"}
    assert again.json()["status"] == "cancelled"
    assert seeded_client.get(f"/v1/reservations/{first['id']}").json()["status"] == "cancelled"


def test_cancelling_a_pending_request_is_refused(seeded_client):
    pending = create(seeded_client).json()

    assert seeded_client.post(f"/v1/reservations/{pending['id']}/cancel").status_code == 409


def test_update_reservation(seeded_client):
    response = seeded_client.patch("/v1/reservations/2", json={"title": "Kickoff v2", "attendees": 6})

    assert response.status_code == 200
    assert response.json()["title"] == "Kickoff v2"
    assert response.json()["description"] == "Initial planning for new product feature"


def test_update_reservation_with_empty_title_is_refused(seeded_client):
    response = seeded_client.patch("/v1/reservations/2", json={"title": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == "title must be at least 3 characters"


def test_approving_for_a_disabled_room_is_a_conflict(seeded_client):
    pending = seeded_client.post("/v1/reservations", json={
        "room_id": 4, "title": "Retro", "start_time": at(9).isoformat(), "end_time": at(10).isoformat(),
    }).json()
    seeded_client.patch("/v1/rooms/4", json={"is_available": False})

    response = seeded_client.post(f"/v1/reservations/{pending['id']}/approve")

    assert response.status_code == 409
    assert seeded_client.get(f"/v1/reservations/{pending['id']}").json()["status"] == "pending"


def test_update_unknown_reservation_is_not_found(seeded_client):
    response = seeded_client.patch("/v1/reservations/42", json={"title": "Nothing"})

    assert response.status_code == 404
    assert len(seeded_client.get("/v1/reservations").json()) == 3


def test_room_schedule(seeded_client):
    week = seeded_client.get("/v1/rooms/1/schedule", params={"start": DAY.isoformat()}).json()

    assert [d["date"] for d in week] == [(DAY + timedelta(days=i)).isoformat() for i in range(7)]
    first_day = {datetime.fromisoformat(s["time"]).hour: s for s in week[0]["time_slots"]}
    assert len(first_day) == 13
    assert [h for h, s in first_day.items() if not s["available"]] == [10, 11]
    assert first_day[10]["reservation"]["title"] == "Executive Meeting"


def test_cancelled_reservations_free_the_schedule(seeded_client):
    seeded_client.post("/v1/reservations/1/cancel")

    week = seeded_client.get("/v1/rooms/1/schedule", params={"start": DAY.isoformat()}).json()

    assert all(s["available"] for s in week[0]["time_slots"])


def test_schedule_for_unknown_room(client):
    assert client.get("/v1/rooms/99/schedule").status_code == 404


def test_current_user_and_my_reservations(seeded_client):
    me = seeded_client.get("/v1/users/me").json()
    mine = seeded_client.get("/v1/users/me/reservations").json()

    assert me["id"] == "user1"
    assert me["name"] == "John Doe"
    assert {r["title"] for r in mine} == {"Executive Meeting", "Company Presentation"}


def test_user_endpoints(seeded_client):
    created = seeded_client.post("/v1/users", json={"name": "Ada", "email": "ada@company.com"}).json()

    assert seeded_client.get(f"/v1/users/{created['id']}").json()["email"] == "ada@company.com"
    assert seeded_client.patch(f"/v1/users/{created['id']}", json={"department": "R&D"}).json()["department"] == "R&D"
    assert len(seeded_client.get("/v1/users").json()) == 3
    assert seeded_client.delete(f"/v1/users/{created['id']}").status_code == 204
    assert seeded_client.get(f"/v1/users/{created['id']}").status_code == 404


def test_admin_stats_and_settings(seeded_client):
    stats = seeded_client.get("/v1/admin/stats").json()
    assert stats == {
        "total_rooms": 4,
        "available_rooms": 4,
        "pending_reservations": 0,
        "confirmed_reservations": 3,
        "cancelled_reservations": 0,
    }

    settings = seeded_client.patch("/v1/admin/settings", json={"auto_approve": True}).json()
    assert settings["auto_approve"] is True
    assert settings["email_notifications"] is True
    assert create(seeded_client).json()["status"] == "confirmed"


def test_maintenance_mode_blocks_user_writes(seeded_client):
    seeded_client.patch("/v1/admin/settings", json={"maintenance_mode": True})

    assert create(seeded_client).status_code == 503
    assert seeded_client.post("/v1/reservations/1/cancel").status_code == 503
    # les actions admin restent disponibles
    assert seeded_client.patch("/v1/rooms/4", json={"capacity": 5}).status_code == 200


def test_latency_is_scaled(monkeypatch):
    from roombooking import config

    monkeypatch.setattr(config, "LATENCY_SCALE", 0.5)

    assert config.latency_seconds("create_reservation") == 0.35
    assert config.latency_seconds("unknown") == 0
