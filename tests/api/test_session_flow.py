"""
Test suite for the session HTTP flow over a real SessionService.

Requests go through the ASGI app on the test's own event loop, backed by
the seeded in-memory database.

System role: Verification of start-to-complete wire contract
"""

import httpx
import pytest
import pytest_asyncio

from backend.api.deps import get_session_service, get_settings_dependency
from backend.api.main import create_app
from backend.application.services.session_service import SessionService
from backend.configs import Settings

LIKERT_ATI = {f"q{i}": 3 for i in range(1, 10)}
LIKERT_IUIPC = {f"q{i}": 6 for i in range(1, 9)}


@pytest_asyncio.fixture
async def api(seeded_db, study_settings, rng):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_session_service] = lambda: SessionService(
        seeded_db, settings=study_settings, rng=rng
    )
    app.dependency_overrides[get_settings_dependency] = lambda: Settings(study=study_settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def final_payload(started: dict) -> dict:
    return {
        "session_id": started["session_id"],
        "context": started["context"],
        "statement_order": started["statement_order"],
        "started_at": started["started_at"],
        "completed_at": started["started_at"],
        "n_images": started["n_images"],
        "images": [
            {
                "image_id": image["image_id"],
                "overall_sensitivity": 1,
                "statement1_regions": [],
                "statement2_regions": [],
            }
            for image in started["images"]
        ],
        "demographics": {
            "age_group": "35-44",
            "gender": "male",
            "academic_background": "arts",
            "current_residence": "NL",
            "ATI": LIKERT_ATI,
            "IUIPC": LIKERT_IUIPC,
        },
        "ATI": LIKERT_ATI,
        "IUIPC": LIKERT_IUIPC,
    }


class TestCompleteFlow:
    @pytest.mark.asyncio
    async def test_repeated_complete_should_report_already_completed(self, api) -> None:
        start = await api.post("/api/sessions/start", params={"n": 16})
        assert start.status_code == 201
        started = start.json()
        payload = final_payload(started)

        first = await api.post(f"/api/sessions/{started['session_id']}/complete", json=payload)
        second = await api.post(f"/api/sessions/{started['session_id']}/complete", json=payload)

        assert first.status_code == 200
        assert first.json()["alreadyCompleted"] is False
        assert second.status_code == 200
        assert second.json()["alreadyCompleted"] is True
        assert second.json()["completed_at"] == first.json()["completed_at"]
        assert "already_completed" not in second.json()

    @pytest.mark.asyncio
    async def test_complete_with_foreign_image_should_be_400(self, api) -> None:
        start = await api.post("/api/sessions/start", params={"n": 8})
        started = start.json()
        payload = final_payload(started)
        payload["images"][0]["image_id"] = "not-assigned.jpg"

        response = await api.post(f"/api/sessions/{started['session_id']}/complete", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "unassigned_image_ids"
