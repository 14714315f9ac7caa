import asyncio

import fitz
import pytest
from fastapi.testclient import TestClient

from qa_generator.main import app
from qa_generator.errors import GENERIC_FAILURE
from qa_generator.routers import qa
from qa_generator.schemas import GenerateBody, GenerationRequest
from qa_generator.services.session import store

client = TestClient(app)


def _generate(**body):
    payload = {"topic": "The American Revolution", "difficulty": "medium", "num_questions": 5}
    payload.update(body)
    return client.post("/qa/generate", json=payload)


def test_health_ok():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.json()["mock"] is True


def test_generate_in_mock_mode():
    r = _generate()
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["session_id"]
    assert len(data["qa_list"]) == 5
    assert len(data["sources"]) == 2
    assert all(s["summary"].startswith("MOCK summary") for s in data["sources"])

    cur = client.get("/qa/current", params={"session_id": data["session_id"]}).json()
    assert cur["is_generating"] is False
    assert cur["error"] is None
    assert cur["request"]["topic"] == "The American Revolution"
    assert len(cur["result"]["qa_list"]) == 5


def test_blank_topic_is_400_and_leaves_session_untouched():
    ok = _generate(session_id="s1")
    assert ok.status_code == 200

    r = _generate(topic="   ", session_id="s1")
    assert r.status_code == 400
    assert r.json()["detail"] == "Please enter a topic."
    assert len(store.get("s1").result.qa_list) == 5


def test_invalid_difficulty_is_422():
    assert _generate(difficulty="extreme").status_code == 422


def test_resubmission_while_generating_is_409():
    store.begin("busy", GenerationRequest(topic="x", difficulty="easy", num_questions=1))
    r = _generate(session_id="busy")
    assert r.status_code == 409


def test_malformed_reply_clears_result_and_reports_generic_error(fake_oracle):
    assert _generate(session_id="s2").status_code == 200

    fake_oracle("Sorry, I cannot produce JSON right now.")
    r = _generate(session_id="s2")
    assert r.status_code == 502
    assert r.json()["detail"] == GENERIC_FAILURE

    cur = client.get("/qa/current", params={"session_id": "s2"}).json()
    assert cur["result"] is None
    assert cur["error"] == GENERIC_FAILURE
    assert cur["is_generating"] is False


def test_unexpected_oracle_error_is_500(fake_oracle):
    fake_oracle(RuntimeError("socket closed"))
    r = _generate(session_id="s3")
    assert r.status_code == 500
    assert "socket closed" in r.json()["detail"]
    assert store.get("s3").is_generating is False


def test_export_pdf_for_session():
    sid = _generate(session_id="pdf").json()["session_id"]
    r = client.get("/export/pdf", params={"session_id": sid})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert 'filename="QA_The_American_Revolution_medium.pdf"' in r.headers["content-disposition"]
    assert r.content.startswith(b"%PDF")

    doc = fitz.open(stream=r.content, filetype="pdf")
    text = "".join(page.get_text() for page in doc)
    assert "The American Revolution" in text
    assert "MOCK question 1?" in text


def test_export_without_result_is_404():
    r = client.get("/export/pdf", params={"session_id": "never-generated"})
    assert r.status_code == 404


def test_cancelled_generation_releases_the_session(fake_oracle):
    fake_oracle(asyncio.CancelledError(), '[{"question": "Q", "answer": "A"}]')
    body = GenerateBody(topic="The American Revolution", session_id="c1")
    with pytest.raises(asyncio.CancelledError):
        asyncio.run(qa.generate_qa(body))
    assert store.get("c1").is_generating is False
    assert store.get("c1").result is None

    r = _generate(session_id="c1")
    assert r.status_code == 200, r.text
    assert len(r.json()["qa_list"]) == 1


def test_anonymous_requests_do_not_grow_sessions_past_cap(monkeypatch):
    monkeypatch.setattr(store, "max_sessions", 5)
    for _ in range(12):
        assert _generate(num_questions=1).status_code == 200
    assert len(store) == 5
