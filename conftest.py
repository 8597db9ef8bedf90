# Ensure project root is on sys.path for tests
import sys, pathlib
import pytest
root = pathlib.Path(__file__).resolve().parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from warband.core.logging import logger


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    # saves and settings default to ~/; never touch the real one
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    level = logger.threshold
    logger.set_level("ERROR")
    yield
    logger.threshold = level
