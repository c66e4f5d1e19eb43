import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def workdir(tmp_path, monkeypatch):
    """Runs the test inside an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
