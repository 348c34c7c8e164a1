from __future__ import annotations

import asyncio
import json

import httpx
import pytest

import flow_manager.client as client_mod
from ai_services import GeneratedQuestion, TranscriptEntry
from flow_manager import DirectInterviewApi, HttpInterviewApi, InterviewApiError


def _http_api(handler) -> HttpInterviewApi:
    transport = httpx.MockTransport(handler)
    return HttpInterviewApi(
        "http://ai.test",
        client=httpx.AsyncClient(transport=transport, base_url="http://ai.test"),
    )


def test_http_api_posts_to_endpoint_paths() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        if request.url.path == "/api/generate-summary":
            return httpx.Response(200, json={"summary": "Promising."})
        return httpx.Response(200, json={"score": 6, "justification": "Partial."})

    async def scenario():
        api = _http_api(handler)
        try:
            evaluation = await api.evaluate_answer("Q", "A")
            summary = await api.generate_summary([TranscriptEntry(text="Q", answer="A", score=6)])
        finally:
            await api.aclose()
        return evaluation, summary

    evaluation, summary = asyncio.run(scenario())
    assert evaluation.score == 6
    assert summary.summary == "Promising."
    assert seen[0] == ("/api/evaluate-answer", {"question": "Q", "answer": "A"})
    assert seen[1][0] == "/api/generate-summary"
    assert seen[1][1]["transcript"][0]["text"] == "Q"


def test_http_api_wraps_server_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Failed to generate question"})

    async def scenario():
        api = _http_api(handler)
        try:
            await api.generate_question("easy")
        finally:
            await api.aclose()

    with pytest.raises(InterviewApiError):
        asyncio.run(scenario())


def test_http_api_rejects_malformed_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    async def scenario():
        api = _http_api(handler)
        try:
            await api.generate_question("hard")
        finally:
            await api.aclose()

    with pytest.raises(InterviewApiError):
        asyncio.run(scenario())


def test_direct_api_runs_services_with_config_path(monkeypatch, tmp_path) -> None:
    captured = {}

    def fake_generate(difficulty, *, config_path):
        captured.update(difficulty=difficulty, config_path=config_path)
        return GeneratedQuestion(question="Explain hoisting.")

    monkeypatch.setattr(client_mod, "generate_question_with_config", fake_generate)
    api = DirectInterviewApi(tmp_path / "app_config.json")
    result = asyncio.run(api.generate_question("easy"))
    assert result.question == "Explain hoisting."
    assert captured == {"difficulty": "easy", "config_path": tmp_path / "app_config.json"}


def test_direct_api_wraps_service_failures(monkeypatch, tmp_path) -> None:
    def boom(resume_text, *, config_path):
        raise RuntimeError("gateway down")

    monkeypatch.setattr(client_mod, "parse_resume_with_config", boom)
    with pytest.raises(InterviewApiError):
        asyncio.run(DirectInterviewApi(tmp_path / "cfg.json").parse_resume("resume"))
