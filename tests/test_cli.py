import httpx
import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from adapters.sideko_api import SidekoClient
from cli import common, doc
from cli.main import app
from conftest import make_tar_gz
from core.config import read_user_env_vars
from core.errors import CliError

runner = CliRunner()


@pytest.fixture
def api(monkeypatch):
    """Route every client the CLI builds through a MockTransport handler."""

    state = {"handler": lambda request: httpx.Response(404), "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def build_client(settings, *, api_key=None):
        return SidekoClient(settings, api_key=api_key, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(common, "build_client", build_client)
    return state


@pytest.fixture
def logged_in(monkeypatch):
    monkeypatch.setenv("SIDEKO_API_KEY", "test-key")


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "sideko 0.1.0" in result.output


def test_generate_saves_archive(api, logged_in, petstore_spec, tmp_path):
    api["handler"] = lambda request: httpx.Response(
        200,
        content=b"tgz",
        headers={"content-disposition": 'attachment; filename="petstore-python.tar.gz"'},
    )

    result = runner.invoke(app, ["generate", str(petstore_spec), "python", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "petstore-python.tar.gz").read_bytes() == b"tgz"
    assert "SDK generated" in result.output
    request = api["requests"][0]
    assert request.url.path == "/v1/sdk/generate/"
    assert request.headers["x-sideko-key"] == "test-key"


def test_generate_extract(api, logged_in, petstore_spec, tmp_path):
    api["handler"] = lambda request: httpx.Response(200, content=make_tar_gz({"sdk/README.md": b"hi"}))

    result = runner.invoke(app, ["generate", str(petstore_spec), "rust", str(tmp_path / "out"), "--extract"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "sdk" / "README.md").read_text() == "hi"


def test_generate_without_api_key_fails(api, petstore_spec):
    result = runner.invoke(app, ["generate", str(petstore_spec), "python"])
    assert result.exit_code == 1
    assert "No Sideko API key found" in result.output
    assert api["requests"] == []


def test_generate_rejects_bad_extension(api, logged_in, tmp_path):
    spec = tmp_path / "spec.txt"
    spec.write_text("")
    result = runner.invoke(app, ["generate", str(spec), "python"])
    assert result.exit_code == 2
    assert api["requests"] == []


def test_generate_rejects_unknown_language(api, logged_in, petstore_spec):
    result = runner.invoke(app, ["generate", str(petstore_spec), "cobol"])
    assert result.exit_code == 2


def test_generate_api_error_exits_1(api, logged_in, petstore_spec, tmp_path):
    api["handler"] = lambda request: httpx.Response(500, json={"message": "boom"})
    result = runner.invoke(app, ["generate", str(petstore_spec), "go", str(tmp_path)])
    assert result.exit_code == 1
    assert "boom" in result.output


def test_sdk_create(api, logged_in, sdk_config, tmp_path):
    api["handler"] = lambda request: httpx.Response(
        200,
        content=make_tar_gz({"petstore-java/pom.xml": b"<project/>"}),
        headers={"content-disposition": 'attachment; filename="petstore-java.tar.gz"'},
    )

    result = runner.invoke(
        app,
        [
            "sdk",
            "create",
            "--config",
            str(sdk_config),
            "--lang",
            "java",
            "--version",
            "1.2.3",
            "--output",
            str(tmp_path / "sdks"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "sdks" / "petstore-java" / "pom.xml").exists()
    assert b'name="sdk_version"\r\n\r\n1.2.3\r\n' in api["requests"][0].content


def test_sdk_create_rejects_bad_version(api, logged_in, sdk_config):
    result = runner.invoke(app, ["sdk", "create", "--config", str(sdk_config), "--lang", "go", "--version", "1.0"])
    assert result.exit_code == 2
    assert api["requests"] == []


def test_sdk_update_requires_existing_repo(api, logged_in, sdk_config, tmp_path):
    result = runner.invoke(
        app,
        ["sdk", "update", "--config", str(sdk_config), "--repo", str(tmp_path / "missing"), "--version", "patch"],
    )
    assert result.exit_code == 2


def test_sdk_update_not_a_git_repo(api, logged_in, sdk_config, tmp_path):
    result = runner.invoke(
        app,
        ["sdk", "update", "--config", str(sdk_config), "--repo", str(tmp_path), "--version", "patch"],
    )
    assert result.exit_code == 1
    assert "not the root of a git" in result.output
    assert api["requests"] == []


def test_sdk_config_init(api, logged_in, tmp_path):
    api["handler"] = lambda request: httpx.Response(200, content=b"api:\n  name: petstore\n")
    out = tmp_path / "petstore.yaml"

    result = runner.invoke(app, ["sdk", "config", "init", "--api-name", "petstore", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_text() == "api:\n  name: petstore\n"


def test_api_list_table_and_json(api, logged_in):
    api["handler"] = lambda request: httpx.Response(
        200,
        json=[
            {
                "id": "api_1",
                "name": "petstore",
                "version_count": 2,
                "url": "https://acme.sideko.dev/petstore",
                "created_at": "2024-05-01",
            }
        ],
    )

    table = runner.invoke(app, ["api", "list"])
    raw = runner.invoke(app, ["api", "list", "--json"])

    assert table.exit_code == 0, table.output
    assert "petstore" in table.output
    assert "URL" in table.output
    assert raw.exit_code == 0
    assert '"version_count": 2' in raw.output


def test_doc_deploy(api, logged_in, monkeypatch):
    monkeypatch.setenv("SIDEKO_DEPLOY_POLL_INTERVAL_SECONDS", "0.01")
    statuses = iter(["Building", "Complete"])
    api["handler"] = lambda request: httpx.Response(
        200, json={"id": "dep_1", "status": next(statuses), "target": "Production"}
    )

    result = runner.invoke(app, ["doc", "deploy", "--name", "docs", "--prod"])

    assert result.exit_code == 0, result.output
    assert "Deployment complete" in result.output
    assert api["requests"][0].method == "POST"
    assert api["requests"][1].url.path == "/v1/doc_project/docs/deployment/dep_1"


def test_login_with_key(api, isolated_env, fake_keyring):
    api["handler"] = lambda request: httpx.Response(200, json={"id": "user_1"})

    result = runner.invoke(app, ["login", "--key", "new-key"])

    assert result.exit_code == 0, result.output
    assert "OS keyring" in result.output
    assert fake_keyring.passwords[("sideko", "SIDEKO_API_KEY")] == "new-key"
    assert not (isolated_env / "sideko.env").exists()
    assert api["requests"][0].headers["x-sideko-key"] == "new-key"


def test_doctor(api, logged_in):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/user/me":
            return httpx.Response(200, json={"email": "dev@example.com"})
        return httpx.Response(200, json=[{"severity": "suggested", "message": "v0.2.0 is out"}])

    api["handler"] = handler

    result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 0, result.output
    assert "dev@example.com" in result.output
    assert "v0.2.0 is out" in result.output


def test_doctor_reports_keyring_key(api, fake_keyring):
    fake_keyring.passwords[("sideko", "SIDEKO_API_KEY")] = "keyring-key"
    api["handler"] = lambda request: httpx.Response(200, json=[] if "updates" in request.url.path else {"id": "user_1"})

    result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 0, result.output
    assert "OS keyring" in result.output
    assert api["requests"][0].headers["x-sideko-key"] == "keyring-key"


def test_login_without_keyring_saves_to_config_file(api, isolated_env, fake_keyring):
    fake_keyring.broken = True
    api["handler"] = lambda request: httpx.Response(200, json={"id": "user_1"})

    result = runner.invoke(app, ["login", "--key", "new-key"])

    assert result.exit_code == 0, result.output
    assert read_user_env_vars()["SIDEKO_API_KEY"] == "new-key"


def test_keyring_key_is_used(api, fake_keyring, petstore_spec, tmp_path):
    fake_keyring.passwords[("sideko", "SIDEKO_API_KEY")] = "keyring-key"
    api["handler"] = lambda request: httpx.Response(200, content=b"tgz")

    result = runner.invoke(app, ["generate", str(petstore_spec), "python", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert api["requests"][0].headers["x-sideko-key"] == "keyring-key"


def _sdk_archive_handler(request: httpx.Request) -> httpx.Response:
    lang = "go" if b'name="language"\r\n\r\ngo\r\n' in request.content else "python"
    return httpx.Response(
        200,
        content=make_tar_gz({f"petstore-{lang}/README.md": lang.encode()}),
        headers={"content-disposition": f'attachment; filename="petstore-{lang}.tar.gz"'},
    )


def test_sdk_init_interactive(api, logged_in, sdk_config, tmp_path):
    api["handler"] = _sdk_archive_handler

    result = runner.invoke(app, ["sdk", "init"], input="\npython, go\n0.2.0\nsdks\nn\n")

    assert result.exit_code == 0, result.output
    assert (tmp_path / "sdks" / "petstore-python" / "README.md").read_text() == "python"
    assert (tmp_path / "sdks" / "petstore-go" / "README.md").read_text() == "go"
    assert len(api["requests"]) == 2
    assert all(b'name="sdk_version"\r\n\r\n0.2.0\r\n' in r.content for r in api["requests"])


def test_sdk_init_unknown_language(api, logged_in, sdk_config):
    result = runner.invoke(app, ["sdk", "init"], input="\ncobol\n")

    assert result.exit_code == 2
    assert "Unknown language `cobol`" in result.output
    assert api["requests"] == []


def test_sdk_config_sync(api, logged_in, sdk_config):
    api["handler"] = lambda request: httpx.Response(200, content=b"api:\n  name: petstore\n  version: 1.2.0\n")

    result = runner.invoke(app, ["sdk", "config", "sync", "--config", str(sdk_config), "--api-version", "1.2.0"])

    assert result.exit_code == 0, result.output
    assert sdk_config.read_text() == "api:\n  name: petstore\n  version: 1.2.0\n"
    request = api["requests"][0]
    assert request.url.path == "/v1/sdk/config/sync"
    assert b'name="api_version"\r\n\r\n1.2.0\r\n' in request.content


def test_doc_deploy_loads_settings_once(api, logged_in, monkeypatch):
    calls = []
    real_load_settings = doc.load_settings

    def counting_load_settings():
        calls.append(1)
        return real_load_settings()

    monkeypatch.setattr(doc, "load_settings", counting_load_settings)
    monkeypatch.setattr(common, "load_settings", counting_load_settings)
    api["handler"] = lambda request: httpx.Response(200, json={"id": "dep_1", "status": "Generated", "target": "Preview"})

    result = runner.invoke(app, ["doc", "deploy", "--name", "docs", "--no-wait"])

    assert result.exit_code == 0, result.output
    assert len(calls) == 1


def test_run_exit_codes(monkeypatch):
    def interrupted():
        raise KeyboardInterrupt

    def failing():
        raise CliError("boom")

    monkeypatch.setattr(cli_main, "app", interrupted)
    with pytest.raises(SystemExit) as excinfo:
        cli_main.run()
    assert excinfo.value.code == 130

    monkeypatch.setattr(cli_main, "app", failing)
    with pytest.raises(SystemExit) as excinfo:
        cli_main.run()
    assert excinfo.value.code == 1
