import pytest


@pytest.fixture(autouse=True)
def _no_host_env(monkeypatch):
    """Keeps a developer's OLLAMA_HOST out of the tests."""
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
