from typing import Iterator

import pytest
from fake_server import FakeMetadataServer


@pytest.fixture
def metadata_server() -> Iterator[FakeMetadataServer]:
    server = FakeMetadataServer()
    server.start()
    yield server
    server.stop()
