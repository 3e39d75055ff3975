import pytest

import sonata_dom


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.delenv(sonata_dom.CONFIG_ENV_VAR, raising=False)
    sonata_dom.reset_config()
    yield
    sonata_dom.reset_config()
