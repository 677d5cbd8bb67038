import pytest

from equity_domain.settings import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Each test reads settings from its own environment."""
    reset_settings()
    yield
    reset_settings()
