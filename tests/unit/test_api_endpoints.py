from __future__ import annotations

from fastapi.testclient import TestClient

import api_server
from ai_services import AnswerEvaluation, CandidateSummary, GeneratedQuestion, ParsedResume


def _client() -> TestClient:
    return TestClient(api_server.create_app())


def test_endpoints_reject_non_post_methods() -> None:
    client = _client()
    for path in ("/api/parse-resume", "/api/generate-question", "/api/evaluate-answer", "/api/generate-summary"):
        response = client.get(path)
        assert response.status_code == 405
        assert "error" in response.json()


def test_malformed_bodies_are_bad_requests() -> None:
    client = _client()
    assert client.post("/api/parse-resume", json={}).status_code == 400
    assert client.post("/api/parse-resume", json={"resumeText": ""}).status_code == 400
    assert client.post("/api/generate-question", json={"difficulty": "expert"}).status_code == 400
    response = client.post("/api/evaluate-answer", json={"question": "What is REST?"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"
    assert client.post("/api/generate-summary", json={"transcript": "none"}).status_code == 400


def test_parse_resume_returns_contact_fields(monkeypatch) -> None:
    captured = {}

    def fake_parse(resume_text, *, config_path):
        captured["text"] = resume_text
        return ParsedResume(name="Jane Doe", email="jane@example.com", phone=None)

    monkeypatch.setattr(api_server, "parse_resume_with_config", fake_parse)
    response = _client().post("/api/parse-resume", json={"resumeText": "Jane Doe resume"})
    assert response.status_code == 200
    assert response.json() == {"name": "Jane Doe", "email": "jane@example.com", "phone": None}
    assert captured["text"] == "Jane Doe resume"


def test_generate_question_and_evaluate_answer(monkeypatch) -> None:
    monkeypatch.setattr(
        api_server,
        "generate_question_with_config",
        lambda difficulty, *, config_path: GeneratedQuestion(question=f"A {difficulty} question"),
    )
    monkeypatch.setattr(
        api_server,
        "evaluate_answer_with_config",
        lambda question, answer, *, config_path: AnswerEvaluation(score=9, justification="Precise."),
    )
    client = _client()
    assert client.post("/api/generate-question", json={"difficulty": "hard"}).json() == {
        "question": "A hard question"
    }
    evaluation = client.post("/api/evaluate-answer", json={"question": "Q", "answer": "A"})
    assert evaluation.status_code == 200
    assert evaluation.json() == {"score": 9, "justification": "Precise."}


def test_generate_summary_accepts_full_question_objects(monkeypatch) -> None:
    captured = {}

    def fake_summary(transcript, *, config_path):
        captured["transcript"] = transcript
        return CandidateSummary(summary="Capable engineer.")

    monkeypatch.setattr(api_server, "generate_summary_with_config", fake_summary)
    body = {
        "transcript": [
            {"text": "Q1", "difficulty": "easy", "answer": "A1", "score": 7, "justification": "ok"},
            {"text": "Q2", "difficulty": "easy", "answer": None, "score": None, "justification": None},
        ]
    }
    response = _client().post("/api/generate-summary", json=body)
    assert response.status_code == 200
    assert response.json() == {"summary": "Capable engineer."}
    assert [entry.text for entry in captured["transcript"]] == ["Q1", "Q2"]


def test_upstream_failures_are_server_errors(monkeypatch) -> None:
    def boom(*args, **kwargs):
        raise RuntimeError("LLM unavailable")

    for name in (
        "parse_resume_with_config",
        "generate_question_with_config",
        "evaluate_answer_with_config",
        "generate_summary_with_config",
    ):
        monkeypatch.setattr(api_server, name, boom)

    client = _client()
    cases = [
        ("/api/parse-resume", {"resumeText": "resume"}, "Failed to parse resume"),
        ("/api/generate-question", {"difficulty": "easy"}, "Failed to generate question"),
        ("/api/evaluate-answer", {"question": "Q", "answer": "A"}, "Failed to evaluate answer"),
        ("/api/generate-summary", {"transcript": []}, "Failed to generate summary"),
    ]
    for path, body, message in cases:
        response = client.post(path, json=body)
        assert response.status_code == 500
        assert response.json() == {"error": message}
