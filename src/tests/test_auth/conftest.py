from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Iterator

import pytest

from awstoolbox.auth import factory
from awstoolbox.auth.config import KEYS

FAKE_STS_CREDENTIALS = {
    "AccessKeyId": "ASIATEMP",
    "SecretAccessKey": "temp-secret",
    "SessionToken": "temp-token",
}


@pytest.fixture(autouse=True)
def clear_aws_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove AWS_* and bare field-name vars to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    field_names = {name.upper() for name in KEYS}
    to_clear = [
        k for k in os.environ if k.upper().startswith("AWS_") or k.upper() in field_names
    ]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


@dataclass
class FakeSTSClient:
    """Records STS calls and answers with fixed temporary credentials."""

    error: Exception | None = None
    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def _answer(self, operation: str, kwargs: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((operation, dict(kwargs)))
        if self.error is not None:
            raise self.error
        return {"Credentials": dict(FAKE_STS_CREDENTIALS)}

    def assume_role(self, **kwargs: Any) -> dict[str, Any]:
        return self._answer("assume_role", kwargs)

    def assume_role_with_web_identity(self, **kwargs: Any) -> dict[str, Any]:
        return self._answer("assume_role_with_web_identity", kwargs)


@dataclass
class Boto3Recorder:
    """Captures every boto3.Session built by the factory."""

    sts: FakeSTSClient
    sessions: list[Any] = field(default_factory=list)

    @property
    def last(self) -> Any:
        return self.sessions[-1]


@pytest.fixture()
def stub_boto3(monkeypatch: pytest.MonkeyPatch) -> Boto3Recorder:
    """Replace ``boto3`` inside the factory with a recording stand-in.

    Returns:
        Boto3Recorder: Exposes built sessions (with their init kwargs and
        the clients requested from them) and the fake STS client.
    """
    recorder = Boto3Recorder(sts=FakeSTSClient())

    class RecordingSession:
        def __init__(self, **kwargs: Any) -> None:
            self.kwargs = dict(kwargs)
            self.clients: list[tuple[str, dict[str, Any]]] = []
            recorder.sessions.append(self)

        def client(self, service_name: str, **kwargs: Any) -> FakeSTSClient:
            self.clients.append((service_name, dict(kwargs)))
            return recorder.sts

    monkeypatch.setattr(factory, "boto3", SimpleNamespace(Session=RecordingSession))
    return recorder
