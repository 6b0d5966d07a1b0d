"""Pantry API tests."""

from datetime import timedelta
from unittest.mock import patch

from shelflife.services.persistence import PersistenceError, PersistenceGateway


def add_item(client, auth_headers, today, name, days, **extra):
    """Add an item expiring ``days`` from today."""
    response = client.post(
        "/api/v1/pantry",
        headers=auth_headers,
        json={"name": name, "expiry_date": (today + timedelta(days=days)).isoformat(), **extra},
    )
    assert response.status_code == 201
    return response.json()


def test_create_pantry_item(client, auth_headers, today):
    """Test creating a pantry item."""
    data = add_item(
        client, auth_headers, today, "Olive Oil", 200, category="Oils", quantity=1, unit="bottle"
    )
    item = data["item"]
    assert item["name"] == "Olive Oil"
    assert item["category"] == "Oils"
    assert item["unit"] == "bottle"
    assert item["status"] == "fresh"
    assert item["days_until_expiry"] == 200
    assert item["added_date"] == today.isoformat()

    # Nothing urgent, so nothing is generated
    assert data["suggestions"]["generated"] is False
    assert data["suggestions"]["recipes"] == []


def test_create_pantry_item_requires_expiry_date(client, auth_headers):
    """Test that the expiry date is mandatory."""
    response = client.post("/api/v1/pantry", headers=auth_headers, json={"name": "Salt"})
    assert response.status_code == 422


def test_create_pantry_item_rejects_blank_name(client, auth_headers, today):
    """Test that an empty name is rejected."""
    response = client.post(
        "/api/v1/pantry",
        headers=auth_headers,
        json={"name": "", "expiry_date": today.isoformat()},
    )
    assert response.status_code == 422


def test_create_urgent_item_returns_fallback_recipes(client, auth_headers, today, mock_llm):
    """Test an urgent item triggers generation, falling back when unconfigured."""
    data = add_item(client, auth_headers, today, "Milk", 1)

    suggestions = data["suggestions"]
    assert suggestions["generated"] is True
    assert suggestions["source"] == "fallback"
    assert suggestions["message"] == "API unavailable, showing curated recipes instead."
    assert len(suggestions["recipes"]) == 3
    assert suggestions["critical_count"] == 1
    assert suggestions["urgent_items"] == ["Milk"]
    mock_llm.generate_json.assert_awaited_once()


def test_list_pantry_items_sorted_by_urgency(client, auth_headers, today):
    """Test listing pantry items, most urgent first."""
    add_item(client, auth_headers, today, "Rice", 60)
    add_item(client, auth_headers, today, "Milk", 2)
    add_item(client, auth_headers, today, "Spinach", -2)

    response = client.get("/api/v1/pantry", headers=auth_headers)
    assert response.status_code == 200
    items = response.json()
    assert [i["name"] for i in items] == ["Spinach", "Milk", "Rice"]
    assert [i["status"] for i in items] == ["expired", "expiring", "fresh"]
    assert items[0]["expiry_text"] == "Expired 2 days ago"


def test_pantry_items_are_per_user(client, auth_headers, today):
    """Test one user cannot see another's items."""
    add_item(client, auth_headers, today, "Milk", 5)
    other = client.post(
        "/api/v1/auth/register",
        json={"email": "other@example.com", "password": "password123", "name": "Other"},
    ).json()
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}

    response = client.get("/api/v1/pantry", headers=other_headers)
    assert response.json() == []


def test_pantry_stats(client, auth_headers, today):
    """Test dashboard counts."""
    add_item(client, auth_headers, today, "Rice", 60)
    add_item(client, auth_headers, today, "Flour", 90)
    add_item(client, auth_headers, today, "Eggs", 3)
    add_item(client, auth_headers, today, "Spinach", -2)

    response = client.get("/api/v1/pantry/stats", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total": 4,
        "fresh": 2,
        "expiring": 1,
        "expired": 1,
        "saved_percentage": 50,
        "critical": 1,
        "urgent_alert": True,
    }


def test_pantry_stats_empty(client, auth_headers):
    """Test stats for an empty pantry."""
    data = client.get("/api/v1/pantry/stats", headers=auth_headers).json()
    assert data["total"] == 0
    assert data["saved_percentage"] == 0
    assert data["urgent_alert"] is False


def test_get_pantry_item(client, auth_headers, today):
    """Test getting a single pantry item."""
    created = add_item(client, auth_headers, today, "Butter", 0)["item"]

    response = client.get(f"/api/v1/pantry/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Butter"
    assert data["expiry_text"] == "Expires today!"


def test_get_missing_pantry_item(client, auth_headers):
    """Test 404 for an unknown item."""
    response = client.get("/api/v1/pantry/99999", headers=auth_headers)
    assert response.status_code == 404


def test_update_pantry_item(client, auth_headers, today):
    """Test updating a pantry item re-evaluates suggestions."""
    created = add_item(client, auth_headers, today, "Yogurt", 30)["item"]

    response = client.put(
        f"/api/v1/pantry/{created['id']}",
        headers=auth_headers,
        json={"expiry_date": (today + timedelta(days=1)).isoformat(), "quantity": 2},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["item"]["status"] == "expiring"
    assert data["item"]["quantity"] == 2
    assert data["suggestions"]["generated"] is True
    assert data["suggestions"]["new_urgent_items"] == ["Yogurt"]


def test_update_missing_pantry_item(client, auth_headers):
    """Test updating an unknown item."""
    response = client.put("/api/v1/pantry/99999", headers=auth_headers, json={"quantity": 2})
    assert response.status_code == 404


def test_mark_item_used(client, auth_headers, today):
    """Test marking an item as used deletes it and regenerates."""
    add_item(client, auth_headers, today, "Milk", 1)
    spinach = add_item(client, auth_headers, today, "Spinach", -2)["item"]

    response = client.delete(f"/api/v1/pantry/{spinach['id']}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["removed_name"] == "Spinach"
    assert data["suggestions"]["generated"] is True
    assert data["suggestions"]["removed_items"] == ["Spinach"]

    get_response = client.get(f"/api/v1/pantry/{spinach['id']}", headers=auth_headers)
    assert get_response.status_code == 404


def test_mark_missing_item_used(client, auth_headers):
    """Test deleting an unknown item."""
    response = client.delete("/api/v1/pantry/99999", headers=auth_headers)
    assert response.status_code == 404


def test_committed_add_survives_suggestion_failure(client, auth_headers, today):
    """Test a storage error after the commit still reports the item as created."""
    with patch.object(
        PersistenceGateway, "get_pantry_items", side_effect=PersistenceError("db down")
    ):
        response = client.post(
            "/api/v1/pantry",
            headers=auth_headers,
            json={"name": "Milk", "expiry_date": today.isoformat()},
        )

    assert response.status_code == 201
    data = response.json()
    assert data["item"]["name"] == "Milk"
    assert data["suggestions"]["generated"] is False
    assert data["suggestions"]["recipes"] == []

    items = client.get("/api/v1/pantry", headers=auth_headers).json()
    assert [i["name"] for i in items] == ["Milk"]


def test_committed_delete_survives_suggestion_failure(client, auth_headers, today):
    """Test a mark-as-used is not reported as failed when re-evaluation cannot read."""
    created = add_item(client, auth_headers, today, "Rice", 40)["item"]

    with patch.object(
        PersistenceGateway, "get_pantry_items", side_effect=PersistenceError("db down")
    ):
        response = client.delete(f"/api/v1/pantry/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["removed_name"] == "Rice"
