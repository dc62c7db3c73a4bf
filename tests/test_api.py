"""
API tests against the seeded in-memory database.

Seed: ten ingredients at branch "downtown", with Gin unavailable.
"""

import httpx
import pytest

from restaurant_portal.main import app
from restaurant_portal.services.accounts.http import HttpAccountRegistrar
from restaurant_portal.services.availability.http import HttpAvailabilityStore
from restaurant_portal.services.catalog.http import HttpCatalogSource
from restaurant_portal.services.signup import SignUpOutcome, SignUpService
from restaurant_portal.services.toggle_engine import ToggleOutcome, load_ingredients_page

SORTED_NAMES = [
    "Angostura Bitters",
    "Crème de Cassis",
    "espresso",
    "Gin",
    "Lime",
    "Mint",
    "Simple Syrup",
    "Tonic Water",
    "Vodka",
    "White Rum",
]


def update_body(name: str, method: str, branch: str = "downtown") -> dict:
    return {"ingredientName": name, "branchId": branch, "method": method}


async def unavailable_at_branch(client) -> set[str]:
    response = await client.get("/currentBranch")
    return {ref["ingredientName"] for ref in response.json()[0]["unavailableIngredients"]}


class TestRootAndHealth:

    async def test_root(self, api_client):
        response = await api_client.get("/")

        assert response.status_code == 200
        assert response.json()["ingredients"] == "/employee/ingredients"

    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "healthy"
        assert data["status"] == "operational"


class TestCatalog:

    async def test_ingredients(self, api_client):
        response = await api_client.get("/ingredients")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 10
        assert data[0] == {
            "ingredientName": "Lime",
            "description": "Fresh limes, juiced to order.",
            "imagePath": "/images/lime.jpg",
        }

    async def test_current_branch(self, api_client):
        response = await api_client.get("/currentBranch")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["_id"] == "downtown"
        assert data[0]["unavailableIngredients"] == [{"ingredientName": "Gin"}]

    async def test_availability_view_is_sorted(self, api_client):
        response = await api_client.get("/employee/ingredients")

        assert response.status_code == 200
        data = response.json()
        assert data["branchId"] == "downtown"
        assert [item["ingredientName"] for item in data["ingredients"]] == SORTED_NAMES
        assert data["availabilityByName"]["Gin"] is False
        assert sum(data["availabilityByName"].values()) == 9

    @pytest.mark.parametrize(
        "search,expected",
        [
            ("gi", ["Gin"]),
            ("ER", ["Angostura Bitters", "Tonic Water"]),
            ("nothing", []),
        ],
    )
    async def test_availability_view_search(self, api_client, search, expected):
        response = await api_client.get("/employee/ingredients", params={"search": search})

        data = response.json()
        assert [item["ingredientName"] for item in data["ingredients"]] == expected
        assert len(data["availabilityByName"]) == 10

    async def test_search_result_carries_availability(self, api_client):
        response = await api_client.get("/employee/ingredients", params={"search": "gi"})

        assert response.json()["ingredients"][0]["available"] is False


class TestUpdateLocationIngredients:

    async def test_remove_makes_available(self, api_client):
        response = await api_client.post("/api/updateLocationIngredients", json=update_body("Gin", "REMOVE"))

        assert response.status_code == 200
        assert response.json()["unavailableIngredients"] == []
        assert await unavailable_at_branch(api_client) == set()

    async def test_add_makes_unavailable(self, api_client):
        response = await api_client.post("/api/updateLocationIngredients", json=update_body("Lime", "ADD"))

        assert response.status_code == 200
        assert sorted(response.json()["unavailableIngredients"]) == ["Gin", "Lime"]
        assert await unavailable_at_branch(api_client) == {"Gin", "Lime"}

    @pytest.mark.parametrize("name,method", [("Gin", "ADD"), ("Lime", "REMOVE")])
    async def test_updates_are_idempotent(self, api_client, name, method):
        for _ in range(2):
            response = await api_client.post("/api/updateLocationIngredients", json=update_body(name, method))
            assert response.status_code == 200

        assert await unavailable_at_branch(api_client) == {"Gin"}

    async def test_name_is_trimmed(self, api_client):
        response = await api_client.post("/api/updateLocationIngredients", json=update_body(" Gin ", "REMOVE"))

        assert response.status_code == 200
        assert response.json()["ingredientName"] == "Gin"

    @pytest.mark.parametrize(
        "body",
        [
            update_body("Unicorn Tears", "ADD"),
            update_body("gin", "REMOVE"),
            update_body("Gin", "REMOVE", branch="uptown"),
        ],
    )
    async def test_unknown_targets_are_404(self, api_client, body):
        response = await api_client.post("/api/updateLocationIngredients", json=body)

        assert response.status_code == 404
        assert await unavailable_at_branch(api_client) == {"Gin"}

    @pytest.mark.parametrize(
        "body",
        [
            update_body("Gin", "TOGGLE"),
            update_body("   ", "ADD"),
            {"ingredientName": "Gin", "method": "ADD"},
        ],
    )
    async def test_invalid_bodies_are_422(self, api_client, body):
        response = await api_client.post("/api/updateLocationIngredients", json=body)

        assert response.status_code == 422


class TestCustomerRegister:

    async def test_register_then_duplicate(self, api_client):
        body = {"username": "jdoe", "emailAddress": "Jane@Example.com", "password": "Abc123!@"}
        response = await api_client.post("/api/customerRegister", json=body)

        assert response.status_code == 201
        assert response.json()["username"] == "jdoe"

        body["emailAddress"] = "jane@example.com"
        response = await api_client.post("/api/customerRegister", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already exists"

    async def test_weak_password_is_422(self, api_client):
        body = {"username": "jdoe", "emailAddress": "jane@example.com", "password": "abc12345"}
        response = await api_client.post("/api/customerRegister", json=body)

        assert response.status_code == 422

    async def test_bad_email_is_422(self, api_client):
        body = {"username": "jdoe", "emailAddress": "not-an-email", "password": "Abc123!@"}
        response = await api_client.post("/api/customerRegister", json=body)

        assert response.status_code == 422


class TestClientsOverApi:
    """The HTTP services and the engine talking to the real endpoints."""

    async def test_engine_toggles_converge_with_server(self, api_client):
        engine = await load_ingredients_page(
            source=HttpCatalogSource(base_url="http://test", client=api_client),
            store=HttpAvailabilityStore(base_url="http://test", client=api_client),
        )

        assert engine.availability_by_name["Gin"] is False

        gin = await engine.toggle_availability("Gin")
        lime = await engine.toggle_availability("Lime")
        unknown = await engine.toggle_availability("Unicorn Tears")

        assert gin.success and lime.success
        assert unknown.outcome is ToggleOutcome.UNKNOWN_INGREDIENT
        assert engine.unavailable_ingredient_names == {"Lime"}
        assert await unavailable_at_branch(api_client) == {"Lime"}

    async def test_signup_over_api(self, api_client):
        service = SignUpService(HttpAccountRegistrar(base_url="http://test", client=api_client))

        first = await service.submit("jdoe", "jane@example.com", "Abc123!@", "Abc123!@")
        second = await service.submit("jane", "JANE@example.com", "Abc123!@", "Abc123!@")

        assert first.outcome is SignUpOutcome.SUCCESS
        assert second.outcome is SignUpOutcome.DUPLICATE_ACCOUNT


class CountingTransport(httpx.AsyncBaseTransport):
    """Forwards to the app and records every request path."""

    def __init__(self, transport: httpx.AsyncBaseTransport):
        self.transport = transport
        self.paths: list[str] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        return await self.transport.handle_async_request(request)


class TestProductionHealth:

    async def test_health_with_http_services_does_not_call_itself(self, api_client, monkeypatch):
        transport = CountingTransport(httpx.ASGITransport(app=app))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            monkeypatch.setattr(
                "restaurant_portal.main.get_availability_store",
                lambda: HttpAvailabilityStore(base_url="http://test", client=client),
            )
            monkeypatch.setattr(
                "restaurant_portal.main.get_account_registrar",
                lambda: HttpAccountRegistrar(base_url="http://test", client=client),
            )
            monkeypatch.setattr(
                "restaurant_portal.main.get_catalog_source",
                lambda: HttpCatalogSource(base_url="http://test", client=client),
            )

            response = await client.get("/health", timeout=5)

        assert response.status_code == 200
        assert response.json()["status"] == "operational"
        assert transport.paths.count("/health") == 1
        assert transport.paths.count("/") == 2
