import io
import tarfile
from pathlib import Path
from typing import Callable

import httpx
import keyring.core
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordSetError

from adapters.sideko_api import SidekoClient
from core.config import AppSettings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the user config at tmp_path and clear any real SIDEKO_* vars."""

    for var in ("SIDEKO_API_KEY", "SIDEKO_BASE_URL", "SIDEKO_CONFIG_PATH"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SIDEKO_CONFIG_PATH", str(tmp_path / "sideko.env"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, api_key="test-key")


@pytest.fixture
def make_client(settings) -> Callable[[Callable[[httpx.Request], httpx.Response]], SidekoClient]:
    def _make(handler):
        return SidekoClient(settings, transport=httpx.MockTransport(handler))

    return _make


def make_tar_gz(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def petstore_spec(tmp_path) -> Path:
    path = tmp_path / "petstore.json"
    path.write_text('{"openapi": "3.0.0", "info": {"title": "Petstore", "version": "1.0.0"}, "paths": {}}')
    return path


@pytest.fixture
def sdk_config(tmp_path) -> Path:
    path = tmp_path / "sdk-config.yaml"
    path.write_text("api:\n  name: petstore\n")
    return path


class MemoryKeyring(KeyringBackend):
    """In-memory keyring; `broken=True` makes every call fail like a missing backend."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}
        self.broken = False

    def get_password(self, service, username):
        if self.broken:
            raise KeyringError("no usable keyring")
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        if self.broken:
            raise PasswordSetError("no usable keyring")
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        self.passwords.pop((service, username), None)


@pytest.fixture(autouse=True)
def fake_keyring(monkeypatch) -> MemoryKeyring:
    backend = MemoryKeyring()
    monkeypatch.setattr(keyring.core, "_keyring_backend", backend)
    return backend
