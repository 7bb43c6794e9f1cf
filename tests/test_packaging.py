import tomllib
from pathlib import Path

import cli.main

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project() -> dict:
    with PYPROJECT.open("rb") as fh:
        return tomllib.load(fh)["project"]


def test_python_floor_supports_tarfile_filters():
    # `tarfile.extractall(filter=...)` first shipped in 3.11.4.
    assert _project()["requires-python"] == ">=3.11.4"


def test_declares_config_libraries():
    deps = " ".join(_project()["dependencies"])
    assert "python-dotenv" in deps
    assert "keyring" in deps


def test_console_script_is_the_only_entry_point():
    assert _project()["scripts"] == {"sideko": "cli.main:run"}
    assert callable(cli.main.run)
    assert not (PYPROJECT.parent / "main.py").exists()
