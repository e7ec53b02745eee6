"""
Tests for CLI commands — install, version, strategies, prompt, config check.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from mato_installer.core.models.platform import PlatformInfo
from mato_installer.core.services.install.detection import platform as platform_mod
from mato_installer.core.services.install.errors import EnvironmentUnknown
from mato_installer.core.use_cases import install as install_uc
from mato_installer.core.use_cases import published as published_uc
from mato_installer.core.use_cases.install import run_install
from mato_installer.main import cli
from tests.install.fakes import FakeRunner, FakeVerifier, fake_catalog


def _transcript(output: str) -> list[str]:
    """Only the machine-readable lines; log records may share the stream."""
    return [
        ln for ln in output.splitlines()
        if ln.startswith(("strategy=", "status=", "error=", "source=", "release="))
    ]


@pytest.fixture
def offline_config(tmp_path: Path) -> Path:
    path = tmp_path / "mato-install.yml"
    path.write_text(textwrap.dedent(f"""\
        installer:
          version_check: false
          install_dir: {tmp_path / "bin"}
    """))
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "fallback chain" in result.output

    def test_version_option(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInstallCommand:

    def _patch_install(self, monkeypatch, **overrides):
        """Route the command through run_install with injected fakes."""
        def fake_run_install(config, **kwargs):
            kwargs.update(overrides)
            return run_install(config, **kwargs)

        monkeypatch.setattr(install_uc, "run_install", fake_run_install)
        monkeypatch.setattr(install_uc, "search_dirs", lambda install_dir: [install_dir])

    def test_exhausted_exit_1(self, monkeypatch, offline_config):
        bin_dir = offline_config.parent / "bin"
        self._patch_install(
            monkeypatch,
            catalog=fake_catalog("a", "b", "c"),
            detector=lambda: PlatformInfo(os="linux", arch="x86_64"),
            runner=FakeRunner({}, bin_dir),
            which=lambda name: None,
        )
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "install"])
        assert result.exit_code == 1
        lines = _transcript(result.output)
        assert [ln.split()[0] for ln in lines] == [
            "strategy=a", "strategy=b", "strategy=c", "status=failed",
        ]
        assert all("result=fail" in ln for ln in lines[:3])

    def test_installed_exit_0(self, monkeypatch, offline_config):
        bin_dir = offline_config.parent / "bin"
        bin_dir.mkdir()
        self._patch_install(
            monkeypatch,
            catalog=fake_catalog("a", "b"),
            detector=lambda: PlatformInfo(os="linux", arch="x86_64"),
            runner=FakeRunner({"b": "ok"}, bin_dir),
            verifier=FakeVerifier("0.4.1"),
            which=lambda name: None,
        )
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "install"])
        assert result.exit_code == 0
        assert _transcript(result.output)[-1] == "status=installed:0.4.1"

    def test_json(self, monkeypatch, offline_config):
        self._patch_install(
            monkeypatch,
            catalog=fake_catalog("a"),
            detector=lambda: PlatformInfo(os="linux", arch="x86_64"),
            runner=FakeRunner({}, offline_config.parent),
            which=lambda name: None,
        )
        result = CliRunner().invoke(
            cli, ["--quiet", "--config", str(offline_config), "install", "--json"],
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["status"] == "failed"
        assert data["attempts"][0]["strategy"] == "a"

    def test_environment_unknown_exit_2(self, monkeypatch, offline_config):
        def detector():
            raise EnvironmentUnknown("Unsupported operating system 'Plan9'")

        self._patch_install(monkeypatch, detector=detector)
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "install"])
        assert result.exit_code == 2
        assert _transcript(result.output) == [
            "error=environment_unknown detail=Unsupported operating system 'Plan9'",
            "status=failed",
        ]

    def test_invalid_config_exit_2(self, tmp_path: Path):
        bad = tmp_path / "mato-install.yml"
        bad.write_text("repository: nope\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "install"])
        assert result.exit_code == 2
        assert _transcript(result.output) == []


class TestVersionCommand:

    def test_unknown_on_failure(self, monkeypatch, offline_config):
        from mato_installer.core.services.install.errors import NetworkFailure

        def failing(url, timeout):
            raise NetworkFailure("offline")

        real_resolver = published_uc.VersionResolver
        monkeypatch.setattr(
            published_uc, "VersionResolver",
            lambda url, timeout: real_resolver(url, timeout=timeout, fetcher=failing),
        )
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "version"])
        assert result.exit_code == 0
        lines = _transcript(result.output)
        assert lines[0].startswith("source=https://mato.sh/version.txt resolved_at=")
        assert lines[1:] == [
            "release=https://github.com/mr-kelly/mato/releases/latest",
            "status=version:unknown",
        ]

    def test_resolved_json(self, monkeypatch, offline_config):
        real_resolver = published_uc.VersionResolver
        monkeypatch.setattr(
            published_uc, "VersionResolver",
            lambda url, timeout: real_resolver(url, timeout=timeout, fetcher=lambda u, t: "0.4.1"),
        )
        result = CliRunner().invoke(
            cli, ["--quiet", "--config", str(offline_config), "version", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["version"] == "0.4.1"
        assert data["release_url"].endswith("/releases/tag/v0.4.1")
        assert data["badge"] == "Mato v0.4.1: Multi-Agent Terminal Office"


class TestStrategiesCommand:

    def test_json_lists_catalog(self, monkeypatch, offline_config):
        monkeypatch.setattr(platform_mod.platform, "system", lambda: "Linux")
        monkeypatch.setattr(platform_mod.platform, "machine", lambda: "x86_64")
        result = CliRunner().invoke(
            cli, ["--quiet", "--config", str(offline_config), "strategies", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["platform"] == "linux/x86_64"
        assert [s["id"] for s in data["strategies"]] == [
            "script", "homebrew", "release-binary", "source",
        ]

    def test_unsupported_platform(self, monkeypatch, offline_config):
        monkeypatch.setattr(platform_mod.platform, "system", lambda: "Windows")
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "strategies"])
        assert result.exit_code == 2


class TestPromptCommand:

    def test_agent_default(self, offline_config):
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "prompt"])
        assert result.exit_code == 0
        assert "Install Mato on this machine and verify it works." in result.output

    def test_human(self, offline_config):
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "prompt", "--for", "human"])
        assert result.exit_code == 0
        assert "# Quick Install (Linux/macOS)" in result.output


class TestConfigCheckCommand:

    def test_valid(self, offline_config):
        result = CliRunner().invoke(cli, ["--config", str(offline_config), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_invalid_json(self, tmp_path: Path):
        bad = tmp_path / "mato-install.yml"
        bad.write_text("disabled: [snap]\n")
        result = CliRunner().invoke(
            cli, ["--quiet", "--config", str(bad), "config", "check", "--json"],
        )
        assert result.exit_code == 2
        data = json.loads(result.stdout)
        assert data["valid"] is False

    def test_valid_lists_disabled(self, tmp_path: Path):
        path = tmp_path / "mato-install.yml"
        path.write_text("disabled: [homebrew, source]\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check"])
        assert result.exit_code == 0
        assert "Artifact: mato (mr-kelly/mato)" in result.output
        assert "Disabled: homebrew, source" in result.output

    def test_invalid_text(self, tmp_path: Path):
        bad = tmp_path / "mato-install.yml"
        bad.write_text("disabled: [snap]\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "config", "check"])
        assert result.exit_code == 2
        assert "Configuration errors" in result.output
        assert "snap" in result.output
