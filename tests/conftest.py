import os

import pytest

from converthub import ClientConfig, ConvertHubClient
from tests.helpers.api import FakeApi


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CONVERTHUB_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("CONVERTHUB_"):
            monkeypatch.delenv(name)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def fast_config():
    """Retries enabled without back-off delays."""
    return ClientConfig(retry_backoff=0)


@pytest.fixture
def client(fake_api, fast_config):
    client = ConvertHubClient("test-api-key", fast_config, transport=fake_api.transport)
    yield client
    client.close()


@pytest.fixture
def make_file(tmp_path):
    def _make(name: str, size: int):
        path = tmp_path / name
        path.write_bytes(os.urandom(size))
        return path

    return _make
