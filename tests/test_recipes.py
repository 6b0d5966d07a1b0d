"""Recipe suggestion API tests."""

from datetime import timedelta

import pytest

from shelflife.models.recipe import RecipeClick


@pytest.fixture
def llm_answers(mock_llm, generated_recipes_payload):
    """Make the LLM double return a well-formed recipe array."""
    mock_llm.generate_json.side_effect = None
    mock_llm.generate_json.return_value = generated_recipes_payload
    return mock_llm


def add_item(client, auth_headers, today, name, days):
    response = client.post(
        "/api/v1/pantry",
        headers=auth_headers,
        json={"name": name, "expiry_date": (today + timedelta(days=days)).isoformat()},
    )
    assert response.status_code == 201
    return response.json()


def test_generated_recipes_are_stored_with_provenance(client, auth_headers, today, llm_answers):
    """Test generated recipes are persisted with the items that triggered them."""
    data = add_item(client, auth_headers, today, "Milk", 1)

    suggestions = data["suggestions"]
    assert suggestions["source"] == "generated"
    assert suggestions["message"] == "Created 3 recipes using your expiring ingredients."
    assert [r["recipe_name"] for r in suggestions["recipes"]] == [
        "Recipe 1",
        "Recipe 2",
        "Recipe 3",
    ]

    response = client.get("/api/v1/recipes", headers=auth_headers)
    assert response.status_code == 200
    stored = response.json()
    assert len(stored) == 3
    for recipe in stored:
        assert recipe["user_id"] == auth_headers.user_id
        assert recipe["triggered_by"] == ["Milk"]
        assert recipe["estimated_time"] == "20-30 min"
        assert recipe["difficulty"] == "Easy"


def test_recipes_respect_household_size(client, auth_headers, today, llm_answers):
    """Test serving sizes follow the onboarding household size."""
    client.put(
        "/api/v1/users/onboarding",
        headers=auth_headers,
        json={"household_size": 4, "dietary_preferences": ["Vegetarian"]},
    )

    data = add_item(client, auth_headers, today, "Spinach", 0)

    recipes = data["suggestions"]["recipes"]
    assert all(r["serving_size"] == "Serves 4" for r in recipes)
    prompt = llm_answers.generate_json.call_args.kwargs["prompt"]
    assert "dietary requirements: Vegetarian" in prompt
    assert "serves 4 people" in prompt


def test_fallback_recipes_are_not_stored(client, auth_headers, today):
    """Test the unconfigured generator yields fallback recipes that are not kept."""
    data = add_item(client, auth_headers, today, "Milk", 1)
    assert data["suggestions"]["source"] == "fallback"

    response = client.get("/api/v1/recipes", headers=auth_headers)
    assert response.json() == []


def test_suggestions_return_stored_recipes_when_unchanged(
    client, auth_headers, today, llm_answers
):
    """Test evaluating an unchanged pantry does not call the generator again."""
    add_item(client, auth_headers, today, "Milk", 1)

    response = client.get("/api/v1/recipes/suggestions", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["generated"] is False
    assert data["source"] == "stored"
    assert len(data["recipes"]) == 3
    assert llm_answers.generate_json.await_count == 1


def test_trigger_state(client, auth_headers, today, llm_answers):
    """Test the trigger state lists the items behind the latest generation."""
    response = client.get("/api/v1/recipes/trigger-state", headers=auth_headers)
    assert response.json() == {"last_triggered_item_names": []}

    add_item(client, auth_headers, today, "Spinach", -2)
    add_item(client, auth_headers, today, "Milk", 1)
    add_item(client, auth_headers, today, "Rice", 40)

    response = client.get("/api/v1/recipes/trigger-state", headers=auth_headers)
    assert response.json() == {"last_triggered_item_names": ["Milk", "Spinach"]}


def test_refresh_regenerates(client, auth_headers, today, llm_answers):
    """Test a manual refresh generates even though nothing changed."""
    add_item(client, auth_headers, today, "Milk", 1)

    response = client.post("/api/v1/recipes/refresh", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["generated"] is True
    assert llm_answers.generate_json.await_count == 2

    stored = client.get("/api/v1/recipes", headers=auth_headers).json()
    assert len(stored) == 6


def test_refresh_with_nothing_urgent(client, auth_headers, today, llm_answers):
    """Test a refresh with a fresh pantry generates nothing."""
    add_item(client, auth_headers, today, "Rice", 40)

    response = client.post("/api/v1/recipes/refresh", headers=auth_headers)
    assert response.json()["generated"] is False
    llm_answers.generate_json.assert_not_called()


def test_list_recipes_limit(client, auth_headers, today, llm_answers):
    """Test the limit query parameter."""
    add_item(client, auth_headers, today, "Milk", 1)

    response = client.get("/api/v1/recipes?limit=2", headers=auth_headers)
    assert len(response.json()) == 2

    response = client.get("/api/v1/recipes?limit=0", headers=auth_headers)
    assert response.status_code == 422


def test_record_click(client, auth_headers, db):
    """Test recording a recipe click."""
    response = client.post(
        "/api/v1/recipes/clicks",
        headers=auth_headers,
        json={"recipe_name": "Simple Soup"},
    )
    assert response.status_code == 201
    assert response.json() == {"recipe_name": "Simple Soup", "recorded": True}

    clicks = db.query(RecipeClick).filter(RecipeClick.user_id == auth_headers.user_id).all()
    assert [c.recipe_name for c in clicks] == ["Simple Soup"]


def test_recipes_require_auth(client):
    """Test recipe endpoints need a token."""
    response = client.get("/api/v1/recipes/suggestions")
    assert response.status_code in (401, 403)
