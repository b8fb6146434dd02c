"""End-to-end loading: discovery, layering, skipping and failure propagation."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from lib_npmrc_config import (
    BasicAuthCredentials,
    FileNotFound,
    FileReadError,
    LoadOptions,
    ParseError,
    TokenCredentials,
    load_config,
    load_config_file,
)
from lib_npmrc_config.core import load_layer
from lib_npmrc_config.adapters.file_loaders.npmrc import NpmrcFileLoader
from tests.support import NpmrcSandbox, create_npmrc_sandbox


@pytest.fixture()
def sandbox(tmp_path: Path) -> NpmrcSandbox:
    return create_npmrc_sandbox(tmp_path)


def test_three_layers_resolve_by_priority(sandbox: NpmrcSandbox) -> None:
    sandbox.write("project", "registry=https://project.example/\n")
    sandbox.write("user", "registry=https://user.example/\nonly-user=u\n")
    sandbox.write("global", "registry=https://global.example/\nonly-user=g\nonly-global=g\n")

    config = sandbox.load()

    assert config.has_project_config() and config.has_user_config() and config.has_global_config()
    assert config.get("registry") == "https://project.example/"
    assert config.get("only-user") == "u"
    assert config.get("only-global") == "g"
    assert config.local_prefix == sandbox.project
    assert config.home == sandbox.home
    assert config.global_prefix == sandbox.prefix
    assert config.project_config_path() == sandbox.path_for("project")
    assert config.global_config_path() == sandbox.path_for("global")


def test_missing_files_become_absent_layers(sandbox: NpmrcSandbox) -> None:
    config = sandbox.load()

    assert not (config.has_project_config() or config.has_user_config() or config.has_global_config())
    assert config.default_registry() == "https://registry.npmjs.org/"
    assert config.credentials_for("https://registry.npmjs.org/") is None
    assert config.scoped_registries() == {}


def test_skip_flags_ignore_existing_files(sandbox: NpmrcSandbox) -> None:
    sandbox.write("project", "a=project\n")
    sandbox.write("user", "a=user\n")
    sandbox.write("global", "a=global\n")

    assert sandbox.load(skip_project=True).get("a") == "user"
    assert sandbox.load(skip_project=True, skip_user=True).get("a") == "global"
    config = sandbox.load(skip_project=True, skip_user=True, skip_global=True)
    assert config.get("a") is None
    assert config.user_config_path() is None


def test_user_config_and_global_prefix_overrides(sandbox: NpmrcSandbox, tmp_path: Path) -> None:
    custom_user = tmp_path / "custom.npmrc"
    custom_user.write_text("source=custom\n", encoding="utf-8")
    other_prefix = tmp_path / "opt" / "node"
    (other_prefix / "etc").mkdir(parents=True)
    (other_prefix / "etc" / "npmrc").write_text("where=opt\n", encoding="utf-8")
    sandbox.write("user", "source=home\n")
    sandbox.write("global", "where=usr\n")

    config = sandbox.load(user_config=custom_user, global_prefix=other_prefix)

    assert config.get("source") == "custom"
    assert config.get("where") == "opt"
    assert config.global_prefix == other_prefix


def test_scoped_registry_and_credentials_across_layers(sandbox: NpmrcSandbox) -> None:
    password = base64.b64encode(b"s3cret").decode("ascii")
    sandbox.write("project", "@myorg:registry=https://npm.myorg.com/\n")
    sandbox.write(
        "user",
        "//npm.myorg.com/:_authToken=${MYORG_TOKEN}\n"
        f"//registry.npmjs.org/:username=demo\n//registry.npmjs.org/:_password={password}\n",
    )

    config = sandbox.load(environ={"MYORG_TOKEN": "from-env"})

    registry = config.registry_for("@myorg/widget")
    assert registry == "https://npm.myorg.com/"
    token = config.credentials_for(registry)
    assert isinstance(token, TokenCredentials) and token.token() == "from-env"

    public = config.credentials_for(config.registry_for("lodash"))
    assert isinstance(public, BasicAuthCredentials)
    assert public.username_password() == ("demo", "s3cret")


def test_certificate_paths_expand_against_home(sandbox: NpmrcSandbox) -> None:
    sandbox.write("user", "//npm.example.com/:certfile=~/certs/c.crt\n//npm.example.com/:keyfile=~/certs/c.key\n")
    credentials = sandbox.load().credentials_for("https://npm.example.com/")
    assert credentials is not None
    cert = credentials.client_cert()
    assert cert is not None
    assert cert.certfile == sandbox.home / "certs" / "c.crt"
    assert cert.keyfile == sandbox.home / "certs" / "c.key"


def test_parse_error_aborts_loading(sandbox: NpmrcSandbox) -> None:
    sandbox.path_for("user").write_bytes(b"registry=\xff\n")
    with pytest.raises(ParseError) as excinfo:
        sandbox.load()
    assert excinfo.value.path == sandbox.path_for("user")


def test_unreadable_file_aborts_loading(sandbox: NpmrcSandbox) -> None:
    (sandbox.project / ".npmrc").mkdir()
    with pytest.raises(FileReadError):
        sandbox.load()


def test_load_config_file_reads_single_project_layer(sandbox: NpmrcSandbox, tmp_path: Path) -> None:
    path = tmp_path / "single.npmrc"
    path.write_text("registry=https://single.example\n", encoding="utf-8")
    sandbox.write("user", "registry=https://ignored.example/\n")

    config = load_config_file(path, resolver=sandbox.resolver(), environ={})

    assert config.has_project_config() and not config.has_user_config() and not config.has_global_config()
    assert config.project_config_path() == path
    assert config.default_registry() == "https://single.example/"


def test_load_config_file_requires_existing_file(sandbox: NpmrcSandbox, tmp_path: Path) -> None:
    with pytest.raises(FileNotFound):
        load_config_file(tmp_path / "missing.npmrc", resolver=sandbox.resolver())


def test_load_layer_variants(sandbox: NpmrcSandbox) -> None:
    loader = NpmrcFileLoader()
    path = sandbox.write("global", "a=1\n")
    assert load_layer("global", path, loader, skip=True) is None
    assert load_layer("global", None, loader) is None
    layer = load_layer("global", path, loader)
    assert layer is not None and layer.level == "global" and layer.get("a") == "1"


def test_default_options_use_process_cwd(sandbox: NpmrcSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    sandbox.write("project", "from=cwd\n")
    monkeypatch.chdir(sandbox.start_dir)
    config = load_config(LoadOptions(skip_user=True, skip_global=True), resolver=sandbox.resolver(), environ={})
    assert config.get("from") == "cwd"
