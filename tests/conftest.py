from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from descript_proxy.clients.descript_client import get_http_client
from descript_proxy.main import app
from tests.fakes import FakeUpstream


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(upstream: FakeUpstream) -> Iterator[TestClient]:
    async def _http_client():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(upstream), follow_redirects=True
        ) as http:
            yield http

    app.dependency_overrides[get_http_client] = _http_client
    try:
        with TestClient(app) as tc:
            yield tc
    finally:
        app.dependency_overrides.clear()
