from __future__ import annotations

from fastapi.testclient import TestClient

import api_server
from ai_services import ParsedResume
from api_server import create_app
from config.settings import settings
from flow_manager.orchestrator import SUBMITTED_MESSAGE
from validation import correction_prompt


def test_resume_to_dashboard_via_http(api_factory, make_flow) -> None:
    api = api_factory(
        resume=ParsedResume(name="Jane Doe", email="bad-email", phone="5551234567"),
        scores=[8, 6, 7, 5, 9, 4],
    )
    flow = make_flow(api)

    with TestClient(create_app(flow=flow)) as client:
        assert client.get("/api/session").json()["state"]["status"] == "idle"

        started = client.post("/api/session/resume", json={"resume_text": "Jane Doe resume"})
        assert started.status_code == 200
        body = started.json()
        assert body["resumable"] is True
        assert body["state"]["correction_queue"] == ["email"]
        assert body["state"]["messages"][-1]["text"] == correction_prompt("email")

        conflict = client.post("/api/session/resume", json={"resume_text": "again"})
        assert conflict.status_code == 409
        assert "error" in conflict.json()

        first = client.post("/api/session/answer", json={"text": "jane@example.com"}).json()
        assert first["state"]["current_question_index"] == 0
        assert first["time_limit"] == 20

        assert client.put("/api/session/draft", json={"text": "thinking"}).status_code == 200
        assert flow.draft == "thinking"

        for index in range(6):
            response = client.post("/api/session/answer", json={"text": f"answer {index}"})
            assert response.status_code == 200

        client.portal.call(flow.drain)
        final = client.get("/api/session").json()
        assert final["state"]["status"] == "finished"
        assert final["state"]["total_score"] == 39
        assert final["state"]["messages"][-1]["text"] == SUBMITTED_MESSAGE
        assert final["resumable"] is False

        listing = client.get("/api/candidates").json()
        assert len(listing) == 1
        assert listing[0]["name"] == "Jane Doe"
        assert listing[0]["email"] == "jane@example.com"
        assert listing[0]["total_score"] == 39

        detail = client.get(f"/api/candidates/{listing[0]['id']}").json()
        assert [question["score"] for question in detail["questions"]] == [8, 6, 7, 5, 9, 4]
        assert detail["final_summary"] == api.summary

        missing = client.get("/api/candidates/unknown")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Candidate not found"}

        reset = client.post("/api/session/reset").json()
        assert reset["state"]["status"] == "idle"
        assert reset["state"]["messages"] == []
        assert len(client.get("/api/candidates").json()) == 1


def test_malformed_session_requests_are_rejected(api_factory, make_flow) -> None:
    flow = make_flow(api_factory())
    with TestClient(create_app(flow=flow)) as client:
        assert client.post("/api/session/resume", json={}).status_code == 400
        assert client.post("/api/session/resume", json={"resume_text": ""}).status_code == 400
        idle = client.post("/api/session/answer", json={"text": "hello"}).json()
        assert idle["state"]["status"] == "idle"
        assert idle["state"]["messages"] == []


def test_persisted_session_is_rehydrated_on_startup(monkeypatch, tmp_path, api_factory) -> None:
    monkeypatch.setattr(settings, "PERSIST_STATE", True)
    monkeypatch.setattr(settings, "STATE_DIR", str(tmp_path / "state"))

    api = api_factory()
    first_flow = api_server.build_flow(api)
    with TestClient(create_app(flow=first_flow)) as client:
        client.post("/api/session/resume", json={"resume_text": "resume"})
        assert client.get("/api/session").json()["state"]["current_question_index"] == 0

    second_flow = api_server.build_flow(api_factory())
    with TestClient(create_app(flow=second_flow)) as client:
        state = client.get("/api/session").json()["state"]
        assert state["status"] == "active"
        assert state["current_question_index"] == 0
        assert state["candidate_details"]["name"] == "Jane Doe"
        assert second_flow.timer_running
