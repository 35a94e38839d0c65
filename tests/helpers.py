"""Test helper functions for common data creation patterns."""

from typing import Any

from httpx import AsyncClient

from tests.factories import AutomationCreateFactory


def create_payload(**overrides: Any) -> dict[str, Any]:
    """Build a valid create body, camelCase as the dashboard sends it.

    Args:
        **overrides: Field values passed to AutomationCreateFactory

    Returns:
        JSON-ready request body
    """
    return AutomationCreateFactory.build(**overrides).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


async def create_automation(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """Create an automation through the API and return the response body."""
    response = await client.post("/api/v1/automations", json=create_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()
