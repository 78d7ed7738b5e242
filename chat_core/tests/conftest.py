import pytest

from stubs import SettingsStub


@pytest.fixture
def settings_stub():
    return SettingsStub()
