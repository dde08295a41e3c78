import pytest
import yaml

from tests.fake.fake_sink import FakeSink
from tests.fake.fake_transport import FakeTransport


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    file = tmp_path / "textrelay.yaml"

    data = {
        "server": {
            "host": "127.0.0.1",
            "port": 9000,
            "backlog": 10,
            "limit_concurrency": 10,
            "timeout_graceful_shutdown": 1,
        },
        "framing": {
            "mode": "line",
            "max_frame_size": 2048,
        },
    }

    file.write_text(yaml.dump(data))
    monkeypatch.setenv("TEST_TEXTRELAYCONFIG", str(file))
    return file
