INQUIRY = {
    "name": "Sachini Fernando",
    "email": "sachini@example.com",
    "phone": "+94 71 555 0101",
    "eventType": "Wedding",
    "eventDate": "2026-12-12",
    "guestCount": 150,
    "message": "Looking for a three-tier cake with <b>fresh flowers</b>.",
}


def test_inquiry_is_forwarded_to_admin(client, mail):
    res = client.post("/api/contact", json=INQUIRY)
    assert res.status_code == 200
    assert res.json()["success"] is True

    assert len(mail.sent) == 1
    sent = mail.sent[0]
    assert sent["subject"] == "New Inquiry from Sachini Fernando"
    assert sent["to"] == ["admin@velvetcrumbs.lk"]
    assert sent["reply_to"] == "sachini@example.com"


def test_inquiry_requires_name_and_valid_email(client, mail):
    res = client.post("/api/contact", json={"name": " ", "email": "nope"})
    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["errors"]}
    assert {"name", "email"} <= fields
    assert mail.sent == []


def test_transport_failure_is_reported(client, mail):
    mail.fail = True
    res = client.post("/api/contact", json=INQUIRY)
    assert res.status_code == 500
    assert res.json()["error_code"] == "INTERNAL_ERROR"


def test_name_with_line_break_is_rejected(client, mail):
    res = client.post("/api/contact", json=dict(INQUIRY, name="Sachini\r\nBcc: someone@example.com"))
    assert res.status_code == 400
    assert [e["field"] for e in res.json()["errors"]] == ["name"]
    assert mail.sent == []
