# =============================================================================
# tests/test_documents.py - Food and Recipe Endpoint Tests
# =============================================================================
# Covers:
# - Listing with the name filter
# - Fetching one document
# - Ownership on create/delete
# - DocumentService error mapping
# =============================================================================

from unittest.mock import MagicMock

import pytest

from app.exceptions import DatabaseError, DocumentNotFoundError
from core.services import DocumentService
from tests.conftest import COOK, make_query

OATS = {
    "id": "food-1",
    "name": "Rolled oats",
    "calories": 379,
    "unit": "100g",
    "owner_id": COOK.id,
    "created_at": "2026-10-01T08:00:00+00:00",
}

OVERNIGHT_OATS = {
    "id": "recipe-1",
    "title": "Overnight oats",
    "ingredients": ["50 g rolled oats", "150 ml milk"],
    "steps": ["Mix", "Wait"],
    "servings": 1,
    "owner_id": COOK.id,
}

NO_ROWS = Exception("{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}")


# =============================================================================
# Food
# =============================================================================

class TestFood:
    def test_list(self, client, query, fake_database):
        query.execute.return_value = MagicMock(data=[OATS])

        response = client.get("/v1/food", params={"q": "oat", "limit": 10})

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Rolled oats"
        fake_database.table.assert_called_with("food")
        query.ilike.assert_called_once_with("name", "%oat%")
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(10)

    def test_list_limit_bounds(self, client):
        response = client.get("/v1/food", params={"limit": 0})

        assert response.status_code == 422
        assert response.json()["error"].startswith("query.limit")

    def test_get(self, client, query):
        query.execute.return_value = MagicMock(data=OATS)

        response = client.get("/v1/food/food-1")

        assert response.status_code == 200
        assert response.json()["id"] == "food-1"
        query.eq.assert_called_with("id", "food-1")

    def test_get_missing(self, client, query):
        query.execute.side_effect = NO_ROWS

        response = client.get("/v1/food/food-9")

        assert response.status_code == 404
        assert response.json() == {"error": "Food not found: food-9"}

    def test_create_requires_login(self, client, query):
        response = client.post("/v1/food", json={"name": "Milk"})

        assert response.status_code == 401
        query.insert.assert_not_called()

    def test_create_sets_owner(self, logged_in_client, query):
        query.execute.return_value = MagicMock(data=[{**OATS, "id": "food-2", "name": "Milk"}])

        response = logged_in_client.post("/v1/food", json={"name": "Milk", "calories": 64})

        assert response.status_code == 201
        assert response.json()["name"] == "Milk"
        inserted = query.insert.call_args.args[0]
        assert inserted["owner_id"] == COOK.id
        assert inserted["calories"] == 64

    def test_create_validation(self, logged_in_client):
        response = logged_in_client.post("/v1/food", json={"name": "Milk", "calories": -1})

        assert response.status_code == 422
        assert response.json()["error"].startswith("calories")

    def test_delete_own(self, logged_in_client, query):
        query.execute.return_value = MagicMock(data=OATS)

        response = logged_in_client.delete("/v1/food/food-1")

        assert response.status_code == 204
        query.delete.assert_called_once()

    def test_delete_someone_elses(self, logged_in_client, query):
        query.execute.return_value = MagicMock(data={**OATS, "owner_id": "user-2"})

        response = logged_in_client.delete("/v1/food/food-1")

        assert response.status_code == 404
        query.delete.assert_not_called()


# =============================================================================
# Recipes
# =============================================================================

class TestRecipes:
    def test_list_filters_on_title(self, client, query, fake_database):
        query.execute.return_value = MagicMock(data=[OVERNIGHT_OATS])

        response = client.get("/v1/recipes", params={"q": "oats"})

        assert response.status_code == 200
        assert response.json()[0]["ingredients"] == OVERNIGHT_OATS["ingredients"]
        fake_database.table.assert_called_with("recipes")
        query.ilike.assert_called_once_with("title", "%oats%")

    def test_get_missing(self, client, query):
        query.execute.side_effect = NO_ROWS

        response = client.get("/v1/recipes/recipe-9")

        assert response.status_code == 404
        assert response.json() == {"error": "Recipe not found: recipe-9"}

    def test_create(self, logged_in_client, query):
        query.execute.return_value = MagicMock(data=[OVERNIGHT_OATS])

        response = logged_in_client.post(
            "/v1/recipes",
            json={"title": "Overnight oats", "ingredients": ["oats"], "servings": 1},
        )

        assert response.status_code == 201
        assert query.insert.call_args.args[0]["owner_id"] == COOK.id

    def test_delete_requires_login(self, client):
        response = client.delete("/v1/recipes/recipe-1")

        assert response.status_code == 401


# =============================================================================
# Service
# =============================================================================

class TestDocumentService:
    def make_service(self, query):
        database = MagicMock()
        database.table.return_value = query
        return DocumentService(database, table="food", kind="Food")

    def test_list_without_filter(self):
        query = make_query(data=None)

        assert self.make_service(query).list() == []
        query.ilike.assert_not_called()

    def test_get_failure(self):
        service = self.make_service(make_query(error=ConnectionError("refused")))

        with pytest.raises(DatabaseError) as exc_info:
            service.get("food-1")

        assert exc_info.value.message == "Database error: Failed to fetch food"

    def test_get_empty_result(self):
        service = self.make_service(make_query(data=None))

        with pytest.raises(DocumentNotFoundError):
            service.get("food-1")

    def test_create_without_returned_row(self):
        service = self.make_service(make_query(data=[]))

        with pytest.raises(DatabaseError):
            service.create({"name": "Milk"}, owner_id=COOK.id)
