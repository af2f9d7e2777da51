"""
Tests for the creature API endpoints.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from adaptation_server.container import ApplicationContainer
from adaptation_server.exceptions import DatabaseError

VALID_PAYLOAD = {
    "name": "Sand Glider",
    "adaptationType": "structural",
    "adaptationDescription": "Wide membranes for gliding over dunes",
    "statBonuses": ["agility", "endurance"],
    "statDrawback": "strength",
    "environment": "desert",
}


class TestCreateCreature:
    """Tests for POST /creatures."""

    async def test_create_returns_201_with_creature(self, client: httpx.AsyncClient) -> None:
        """Test a successful creation response."""
        response = await client.post("/creatures", json=VALID_PAYLOAD)

        assert response.status_code == 201
        creature = response.json()["creature"]
        assert creature["id"]
        assert creature["name"] == "Sand Glider"
        assert creature["adaptationType"] == "structural"
        assert creature["statBonuses"] == ["agility", "endurance"]
        assert creature["imageUrl"] == "/placeholder.svg?height=100&width=100"
        assert creature["imageId"] == ""
        assert creature["createdAt"]

    async def test_survival_chance_is_always_in_range(self, client: httpx.AsyncClient) -> None:
        """Test that every created creature gets a chance in [50, 80]."""
        for _ in range(25):
            response = await client.post("/creatures", json=VALID_PAYLOAD)
            assert 50 <= response.json()["creature"]["survivalChance"] <= 80

    async def test_client_supplied_survival_chance_is_ignored(self, client: httpx.AsyncClient) -> None:
        """Test that clients cannot choose their own survival chance."""
        response = await client.post("/creatures", json={**VALID_PAYLOAD, "survivalChance": 100})

        assert 50 <= response.json()["creature"]["survivalChance"] <= 80

    async def test_optional_fields_may_be_omitted(self, client: httpx.AsyncClient) -> None:
        """Test that only name, adaptationType and environment are required."""
        response = await client.post(
            "/creatures", json={"name": "Frost Hare", "adaptationType": "physiological", "environment": "tundra"}
        )

        assert response.status_code == 201
        creature = response.json()["creature"]
        assert creature["statBonuses"] == []
        assert creature["statDrawback"] == ""

    async def test_image_fields_are_stored(self, client: httpx.AsyncClient) -> None:
        """Test that an uploaded image reference is kept."""
        payload = {
            **VALID_PAYLOAD,
            "imageUrl": "/images/0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f",
            "imageId": "0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f",
        }

        creature = (await client.post("/creatures", json=payload)).json()["creature"]

        assert creature["imageUrl"] == payload["imageUrl"]
        assert creature["imageId"] == payload["imageId"]

    async def test_null_description_is_accepted(self, client: httpx.AsyncClient) -> None:
        """Test that a null adaptationDescription is stored as empty text."""
        response = await client.post(
            "/creatures",
            json={"name": "Glider", "adaptationType": "structural", "environment": "desert", "adaptationDescription": None},
        )

        assert response.status_code == 201
        assert response.json()["creature"]["adaptationDescription"] == ""

    @pytest.mark.parametrize("missing", ["name", "adaptationType", "environment"])
    async def test_missing_required_field_returns_400(self, client: httpx.AsyncClient, missing: str) -> None:
        """Test that each required field is enforced."""
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != missing}

        response = await client.post("/creatures", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    @pytest.mark.parametrize("blank", ["name", "adaptationType", "environment"])
    async def test_empty_required_field_returns_400(self, client: httpx.AsyncClient, blank: str) -> None:
        """Test that empty strings count as missing."""
        response = await client.post("/creatures", json={**VALID_PAYLOAD, blank: ""})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    @pytest.mark.parametrize(
        "override",
        [
            {"adaptationType": "magical"},
            {"statBonuses": ["agility"]},
            {"statBonuses": ["agility", "agility"]},
            {"statBonuses": ["agility", "endurance", "stealth"]},
            {"statBonuses": ["agility", "charisma"]},
            {"statDrawback": "luck"},
        ],
    )
    async def test_invalid_values_return_400(self, client: httpx.AsyncClient, override: dict) -> None:
        """Test that malformed optional values are rejected."""
        response = await client.post("/creatures", json={**VALID_PAYLOAD, **override})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request data"

    async def test_database_failure_returns_500(self, client: httpx.AsyncClient, container: ApplicationContainer) -> None:
        """Test that storage failures map to a 500 JSON error."""
        with patch.object(
            container.creature_repository,
            "create_creature",
            AsyncMock(side_effect=DatabaseError("boom", operation="create_creature")),
        ):
            response = await client.post("/creatures", json=VALID_PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create creature"}


class TestListCreatures:
    """Tests for GET /creatures."""

    async def test_list_is_newest_first(self, client: httpx.AsyncClient) -> None:
        """Test that the newest creature is listed first."""
        first = (await client.post("/creatures", json={**VALID_PAYLOAD, "name": "first"})).json()["creature"]
        second = (await client.post("/creatures", json={**VALID_PAYLOAD, "name": "second"})).json()["creature"]

        response = await client.get("/creatures")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["creatures"]] == [second["id"], first["id"]]

    async def test_filter_by_environment(self, client: httpx.AsyncClient) -> None:
        """Test the environment query parameter."""
        await client.post("/creatures", json=VALID_PAYLOAD)
        marine = (await client.post("/creatures", json={**VALID_PAYLOAD, "environment": "marine"})).json()["creature"]

        response = await client.get("/creatures", params={"environment": "marine"})

        assert [c["id"] for c in response.json()["creatures"]] == [marine["id"]]

    async def test_empty_store_returns_empty_list(self, client: httpx.AsyncClient) -> None:
        """Test listing with no creatures."""
        response = await client.get("/creatures")

        assert response.status_code == 200
        assert response.json() == {"creatures": []}

    async def test_database_failure_returns_500(self, client: httpx.AsyncClient, container: ApplicationContainer) -> None:
        """Test that listing failures map to a 500 JSON error."""
        with patch.object(
            container.creature_repository,
            "list_creatures",
            AsyncMock(side_effect=DatabaseError("boom", operation="list_creatures")),
        ):
            response = await client.get("/creatures")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch creatures"}


class TestDeleteCreature:
    """Tests for DELETE /creatures/{id}."""

    async def test_delete_existing_creature(self, client: httpx.AsyncClient) -> None:
        """Test a successful deletion."""
        creature = (await client.post("/creatures", json=VALID_PAYLOAD)).json()["creature"]

        response = await client.delete(f"/creatures/{creature['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Creature deleted successfully"}
        assert (await client.get("/creatures")).json()["creatures"] == []

    async def test_delete_nonexistent_returns_404(self, client: httpx.AsyncClient) -> None:
        """Test that an unknown id returns 404 rather than failing."""
        response = await client.delete("/creatures/0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f")

        assert response.status_code == 404
        assert response.json() == {"error": "Creature not found"}

    async def test_delete_malformed_id_returns_404(self, client: httpx.AsyncClient) -> None:
        """Test that a malformed id is treated as not found."""
        response = await client.delete("/creatures/xyz")

        assert response.status_code == 404

    async def test_delete_without_id_returns_400(self, client: httpx.AsyncClient) -> None:
        """Test that a delete without an id is rejected."""
        response = await client.delete("/creatures")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing creature ID"}

    async def test_delete_removes_owned_image(
        self, client: httpx.AsyncClient, container: ApplicationContainer, png_bytes: bytes
    ) -> None:
        """Test that the creature's uploaded image is deleted with it."""
        upload = await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})
        file_id = upload.json()["fileId"]
        creature = (
            await client.post("/creatures", json={**VALID_PAYLOAD, "imageId": file_id, "imageUrl": f"/images/{file_id}"})
        ).json()["creature"]

        response = await client.delete(f"/creatures/{creature['id']}")

        assert response.status_code == 200
        assert (await client.get(f"/images/{file_id}")).status_code == 404

    async def test_image_delete_failure_still_deletes_creature(
        self, client: httpx.AsyncClient, container: ApplicationContainer, seed_creature
    ) -> None:
        """Test that a failing image delete does not block creature deletion."""
        creature = await seed_creature(image_id="0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f")

        with patch.object(container.blob_store, "delete", AsyncMock(return_value=False)) as mock_delete:
            response = await client.delete(f"/creatures/{creature.id}")

        assert response.status_code == 200
        mock_delete.assert_awaited_once()
        assert await container.creature_repository.get_creature(creature.id) is None

    async def test_delete_accepts_uppercase_id(self, client: httpx.AsyncClient, seed_creature) -> None:
        """Test that ids are matched case-insensitively."""
        creature = await seed_creature()

        response = await client.delete(f"/creatures/{creature.id.upper()}")

        assert response.status_code == 200
        assert (await client.get("/creatures")).json()["creatures"] == []
