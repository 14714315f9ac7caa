import pytest

from qa_generator.errors import GenerationInProgress
from qa_generator.schemas import GenerationRequest, GenerationResult, QAItem
from qa_generator.services.session import SessionStore

REQ = GenerationRequest(topic="Photosynthesis", difficulty="easy", num_questions=1)
RESULT = GenerationResult(qa_list=[QAItem(question="Q", answer="A")])


def test_unknown_session_is_empty():
    snap = SessionStore().get("nobody")
    assert snap.result is None and snap.error is None and not snap.is_generating


def test_begin_clears_previous_result_before_new_call():
    s = SessionStore()
    s.begin("sid", REQ)
    s.complete("sid", RESULT)
    assert s.get("sid").result == RESULT

    nxt = GenerationRequest(topic="Mitosis", difficulty="hard", num_questions=2)
    snap = s.begin("sid", nxt)
    assert snap.is_generating
    assert snap.result is None and snap.error is None
    assert s.get("sid").request == nxt


def test_second_begin_while_generating_is_refused():
    s = SessionStore()
    s.begin("sid", REQ)
    with pytest.raises(GenerationInProgress):
        s.begin("sid", REQ)
    # other sessions are independent
    s.begin("other", REQ)


def test_fail_leaves_no_result():
    s = SessionStore()
    s.begin("sid", REQ)
    snap = s.fail("sid", "Failed to generate Q&A.")
    assert snap.result is None
    assert snap.error == "Failed to generate Q&A."
    assert not snap.is_generating
    # a failed session can be retried
    s.begin("sid", REQ)


def test_snapshots_are_replaced_not_mutated():
    s = SessionStore()
    before = s.begin("sid", REQ)
    s.complete("sid", RESULT)
    assert before.result is None and before.is_generating


def test_store_is_capped_and_evicts_least_recently_used():
    s = SessionStore(max_sessions=3)
    for i in range(5):
        s.begin(f"s{i}", REQ)
        s.complete(f"s{i}", RESULT)
    assert len(s) == 3
    assert s.get("s0").request is None and s.get("s1").request is None
    assert s.get("s4").result == RESULT


def test_reading_a_session_keeps_it_alive():
    s = SessionStore(max_sessions=2)
    s.begin("a", REQ); s.complete("a", RESULT)
    s.begin("b", REQ); s.complete("b", RESULT)
    s.get("a")
    s.begin("c", REQ); s.complete("c", RESULT)
    assert s.get("a").result == RESULT
    assert s.get("b").request is None


def test_in_flight_sessions_are_not_evicted():
    s = SessionStore(max_sessions=2)
    s.begin("busy", REQ)
    s.begin("x", REQ); s.complete("x", RESULT)
    s.begin("y", REQ); s.complete("y", RESULT)
    assert s.get("busy").is_generating
    assert len(s) == 2
