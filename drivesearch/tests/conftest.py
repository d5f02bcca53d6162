import pytest

from drivesearch.tests.fakes import FakeDriveClient


@pytest.fixture
def drive():
    return FakeDriveClient()
