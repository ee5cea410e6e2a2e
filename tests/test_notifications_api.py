from conftest import assignment_payload


def test_notification_endpoints(client, create_item):
    chair = create_item(name="Chair", quantity_purchased=10, unit_price=20.0)
    client.post("/api/assignments", json=assignment_payload(chair["id"], 7))
    lamp = create_item(name="Lamp", quantity_purchased=1, unit_price=20.0)
    client.post("/api/assignments", json=assignment_payload(lamp["id"], 1))

    summary = client.post("/api/notifications/run-checks").json()
    assert summary["failed"] == []
    assert summary["created"]["low_stock"] == 1
    assert summary["created"]["reorder_suggestion"] == 1

    notifications = client.get("/api/notifications").json()
    assert len(notifications) == 2
    assert {n["type"] for n in notifications} == {"low_stock", "reorder_suggestion"}
    assert all(n["isRead"] is False for n in notifications)

    rerun = client.post("/api/notifications/run-checks").json()
    assert sum(rerun["created"].values()) == 0

    first = notifications[0]
    marked = client.patch(f"/api/notifications/{first['id']}/read")
    assert marked.status_code == 200
    assert marked.json()["isRead"] is True
    assert client.patch(f"/api/notifications/{first['id']}/read").json()["isRead"] is True

    unread = client.get("/api/notifications/unread").json()
    assert [n["id"] for n in unread] == [notifications[1]["id"]]

    assert client.post("/api/notifications/mark-all-read").json() == {"updated": 1}
    assert client.get("/api/notifications/unread").json() == []
    assert client.post("/api/notifications/mark-all-read").json() == {"updated": 0}
    assert client.get("/api/notifications/unread").json() == []


def test_mark_read_missing_notification(client):
    response = client.patch("/api/notifications/999/read")
    assert response.status_code == 404
    assert response.json()["detail"] == "Notification not found"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
