"""
Root pytest configuration.

Makes the package importable from a source checkout and points settings,
config and log paths at a temporary DIAGRAMFLOW_HOME for every test.
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from diagramflow.utils.paths import HOME_ENV_VAR
from diagramflow.utils.settings import reset_settings


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Give each test its own settings/config/log directory."""
    home = tmp_path / "diagramflow_home"
    monkeypatch.setenv(HOME_ENV_VAR, str(home))
    reset_settings()
    yield home
    reset_settings()
