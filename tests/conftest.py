import os

# Offline oracle and a generous limiter before the app/settings are imported.
os.environ.setdefault("MOCK_MODE", "1")
os.environ.setdefault("RATE_LIMIT", "1000/minute")

import pytest

from qa_generator.services import generator
from qa_generator.services.llm import OracleReply
from qa_generator.services.session import store


@pytest.fixture(autouse=True)
def _fresh_sessions():
    store.clear()
    yield
    store.clear()


@pytest.fixture
def fake_oracle(monkeypatch):
    """
    Replace the oracle with a scripted one. Each call pops the next reply;
    a BaseException instance is raised instead of returned.
    """
    def install(*replies):
        calls = []

        async def _llm(prompt):
            calls.append(prompt)
            reply = replies[len(calls) - 1]
            if isinstance(reply, BaseException):
                raise reply
            if isinstance(reply, str):
                return OracleReply(text=reply)
            return reply

        monkeypatch.setattr(generator, "llm", _llm)
        return calls

    return install
