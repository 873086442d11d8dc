import json
from functools import partial
from typing import List

import httpx
import pytest

from pegasus import cli, config
from pegasus.app import App


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "pegasus" / "config.toml"
    monkeypatch.setattr(config, "CONFIG_PATH", path)
    return path


class FakeChatService:
    """Answers the reachability check and chat-completion POSTs in memory."""

    def __init__(self, reply="Hello world", check_status=404, post_status=200, payload=None):
        self.reply = reply
        self.check_status = check_status
        self.post_status = post_status
        self.payload = payload
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            return httpx.Response(self.check_status)
        if self.payload is not None:
            return httpx.Response(self.post_status, json=self.payload)
        return httpx.Response(
            self.post_status,
            json={"choices": [{"message": {"role": "assistant", "content": self.reply}}]},
        )

    @property
    def posts(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def last_body(self) -> dict:
        return json.loads(self.posts[-1].content)


@pytest.fixture
def chat_service(monkeypatch):
    service = FakeChatService()
    monkeypatch.setattr(cli, "App", partial(App, transport=service.transport))
    return service
