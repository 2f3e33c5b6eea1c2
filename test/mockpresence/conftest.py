import pytest

from mockpresence import reset_default_channels


@pytest.fixture(autouse=True)
def isolated_default_channels():
    reset_default_channels()
    yield
    reset_default_channels()
