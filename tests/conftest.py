import pytest

from snapcaption.services.status_store import StatusStore

from tests.fakes import JPEG_BYTES


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def camera_dir(tmp_path):
    d = tmp_path / "shots"
    d.mkdir()
    (d / "desk.jpg").write_bytes(JPEG_BYTES)
    return d
