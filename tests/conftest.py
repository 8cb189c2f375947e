import pytest

from common.http_client import clear_cache


@pytest.fixture(autouse=True)
def _fresh_http_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture(autouse=True)
def _no_ci_files(monkeypatch):
    """Keep exports from leaking into the CI runner's env/output files."""
    monkeypatch.delenv("GITHUB_ENV", raising=False)
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
