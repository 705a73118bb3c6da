def _create_venue(client, headers, city="Portland"):
    response = client.post(
        "/venues",
        json={"name": "Riverside Hall", "city": city, "address": "100 Water Ave"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


def _event_payload(venue_id, title="Night Market Jazz"):
    return {
        "venueId": venue_id,
        "title": title,
        "description": "Late set with the house trio.",
        "startTime": "2030-06-01T19:30:00Z",
        "endTime": "2030-06-01T22:30:00Z",
        "standardPrice": "25.00",
    }


def test_organizer_event_lifecycle(client, organizer_headers):
    venue_id = _create_venue(client, organizer_headers)

    created = client.post(
        "/organizer/events",
        json=_event_payload(venue_id),
        headers=organizer_headers,
    )
    assert created.status_code == 201
    event_id = created.json()["id"]
    assert created.json()["status"] == "Scheduled"

    mine = client.get("/organizer/events", headers=organizer_headers)
    assert [event["id"] for event in mine.json()] == [event_id]

    patched = client.patch(
        f"/organizer/events/{event_id}",
        json={"title": "Night Market Jazz (Late)", "status": "Cancelled"},
        headers=organizer_headers,
    )
    assert patched.status_code == 200
    assert patched.json()["title"] == "Night Market Jazz (Late)"
    assert patched.json()["status"] == "Cancelled"

    deleted = client.delete(f"/organizer/events/{event_id}", headers=organizer_headers)
    assert deleted.status_code == 204
    assert client.get(f"/events/{event_id}").status_code == 404


def test_event_patch_rejects_unknown_fields(client, organizer_headers, make_event):
    listing = make_event()

    response = client.patch(
        f"/organizer/events/{listing.event_id}",
        json={"organizerId": "someone-else"},
        headers=organizer_headers,
    )

    assert response.status_code == 400


def test_event_patch_rejects_inverted_window(client, organizer_headers, make_event):
    listing = make_event()

    response = client.patch(
        f"/organizer/events/{listing.event_id}",
        json={"endTime": "2030-05-01T00:00:00Z"},
        headers=organizer_headers,
    )

    assert response.status_code == 400


def test_foreign_event_is_hidden(client, make_event):
    listing = make_event()
    intruder = {"X-User-Id": "organizer-2", "X-User-Role": "Organizer"}

    assert client.get(f"/organizer/events/{listing.event_id}", headers=intruder).status_code == 404
    assert client.delete(f"/organizer/events/{listing.event_id}", headers=intruder).status_code == 404


def test_event_with_tickets_cannot_be_deleted(
    client, organizer_headers, make_event, make_ticket
):
    listing = make_event()
    make_ticket(listing.event_id)

    response = client.delete(
        f"/organizer/events/{listing.event_id}",
        headers=organizer_headers,
    )

    assert response.status_code == 409


def test_public_search(client, make_event):
    jazz = make_event(title="Night Market Jazz", city="Portland")
    make_event(title="Harbor Folk Night", city="Seattle")

    by_text = client.get("/events", params={"q": "jazz"})
    assert [event["id"] for event in by_text.json()] == [jazz.event_id]

    by_city = client.get("/events", params={"city": "Seattle"})
    assert [event["title"] for event in by_city.json()] == ["Harbor Folk Night"]

    assert len(client.get("/events", params={"limit": 1}).json()) == 1


def test_available_seats_endpoint(client, organizer_headers, make_event, make_ticket):
    listing = make_event()
    make_ticket(listing.event_id, "A-1")

    response = client.get(
        f"/organizer/events/{listing.event_id}/available-seats",
        headers=organizer_headers,
    )

    assert response.status_code == 200
    labels = [seat["label"] for seat in response.json()]
    assert len(labels) == 259
    assert "A-1" not in labels


def test_customer_cannot_manage_events(client, customer_headers):
    assert client.get("/organizer/events", headers=customer_headers).status_code == 403
