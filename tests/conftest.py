from __future__ import annotations

import asyncio
import json
import os
import socket
from typing import Any, List

import pytest

# Unit-test-safe configuration, set before config.py is imported anywhere.
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("WEB_SESSION_SECRET", "test-secret")


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound calls to a real LLM provider."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


# correct option per question in the default batch
CORRECT = [1, 0, 3, 2, 1]


def make_items(n: int = 5) -> List[dict]:
    return [
        {
            "question": f"Q{i + 1}: which lab announced model #{i + 1}?",
            "options": [f"q{i + 1}-a", f"q{i + 1}-b", f"q{i + 1}-c", f"q{i + 1}-d"],
            "correctAnswer": CORRECT[i % len(CORRECT)],
        }
        for i in range(n)
    ]


class FakeLLM:
    """
    Returns (or raises) queued responses in order; the last one repeats.
    """

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.prompts: List[str] = []
        self.systems: List[Any] = []

    async def generate(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        self.systems.append(kwargs.get("system"))
        r = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(r, BaseException):
            raise r
        return r


class GatedLLM:
    """Each call blocks until the test releases it with a result."""

    def __init__(self):
        self.calls: List[dict] = []

    async def generate(self, prompt: str, **kwargs: Any) -> str:
        slot = {"gate": asyncio.Event(), "result": None}
        self.calls.append(slot)
        await slot["gate"].wait()
        r = slot["result"]
        if isinstance(r, BaseException):
            raise r
        return r

    def release(self, i: int, result: Any) -> None:
        self.calls[i]["result"] = result
        self.calls[i]["gate"].set()


async def settle(rounds: int = 10) -> None:
    """Let already-scheduled tasks run to their next real wait."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def items() -> List[dict]:
    return make_items()


@pytest.fixture
def valid_raw(items) -> str:
    return json.dumps(items)
