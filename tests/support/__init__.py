"""Shared fixtures for building throwaway ``.npmrc`` layouts.

The sandbox mirrors npm's discovery rules: a project directory marked by
``package.json``, a home directory holding ``.npmrc`` and a global prefix with
``etc/npmrc``. Everything lives under ``tmp_path`` and the resolver reads an
injected environment, so tests never touch the real user configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import pytest

from lib_npmrc_config.adapters.path_resolvers.default import DefaultPathResolver
from lib_npmrc_config.application.resolved import NpmrcConfig
from lib_npmrc_config.core import LoadOptions, load_config


@dataclass
class NpmrcSandbox:
    """Temporary project/home/prefix directories plus helpers to populate them."""

    root: Path
    project: Path
    home: Path
    prefix: Path

    @property
    def start_dir(self) -> Path:
        """Nested directory inside the project, used as the discovery start point."""

        return self.project / "src" / "lib"

    @property
    def env(self) -> dict[str, str]:
        """Environment overrides pointing the resolver at the sandbox."""

        return {"HOME": str(self.home), "USERPROFILE": str(self.home), "PREFIX": str(self.prefix)}

    def apply_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Point the live process environment at the sandbox (for CLI runs)."""

        for key, value in self.env.items():
            monkeypatch.setenv(key, value)

    def path_for(self, level: str) -> Path:
        return {
            "project": self.project / ".npmrc",
            "user": self.home / ".npmrc",
            "global": self.prefix / "etc" / "npmrc",
        }[level]

    def write(self, level: str, content: str) -> Path:
        """Write *content* as the ``.npmrc`` for *level* and return its path."""

        path = self.path_for(level)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def resolver(self) -> DefaultPathResolver:
        return DefaultPathResolver(env=self.env, platform="linux", which=lambda *_args, **_kwargs: None)

    def load(self, environ: Mapping[str, str] | None = None, **overrides: object) -> NpmrcConfig:
        """Load the sandbox configuration starting from :attr:`start_dir`."""

        options = LoadOptions(cwd=self.start_dir, **overrides)  # type: ignore[arg-type]
        return load_config(options, resolver=self.resolver(), environ=environ if environ is not None else {})


def create_npmrc_sandbox(tmp_path: Path) -> NpmrcSandbox:
    """Create the sandbox directory tree under *tmp_path*."""

    project = tmp_path / "work" / "project"
    home = tmp_path / "home" / "demo"
    prefix = tmp_path / "usr" / "local"
    for directory in (project / "src" / "lib", home, prefix):
        directory.mkdir(parents=True, exist_ok=True)
    (project / "package.json").write_text("{}", encoding="utf-8")
    return NpmrcSandbox(root=tmp_path, project=project, home=home, prefix=prefix)


__all__ = ["NpmrcSandbox", "create_npmrc_sandbox"]
