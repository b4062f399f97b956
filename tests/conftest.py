import pytest

from commit_ai.config import loader


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Hide any real credentials and ``.env`` file from the tests.

    Tests that need configuration set the variables themselves. The working
    directory is moved to an empty temporary directory so a developer's
    ``.env`` is never picked up.
    """
    for name in (
        loader.API_KEY_VAR,
        loader.MODEL_VAR,
        loader.BASE_URL_VAR,
        loader.TIMEOUT_VAR,
        loader.MAX_TOKENS_VAR,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
