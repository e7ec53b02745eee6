"""
Install — transcript rendering and install instructions.
"""

from __future__ import annotations

import pytest

from mato_installer.core.models.attempt import InstallAttempt
from mato_installer.core.models.config import InstallerConfig
from mato_installer.core.models.session import Attempting, InstallSession, Succeeded
from mato_installer.core.models.version import VersionQuery
from mato_installer.core.services.install.orchestration.agent_prompt import (
    render_agent_prompt,
    render_human_instructions,
)
from mato_installer.core.services.install.orchestration.report import (
    render_attempt,
    render_environment_error,
    render_session,
    render_status,
    render_version_query,
    session_to_dict,
)


def _finished_session() -> InstallSession:
    session = InstallSession()
    session.advance(Attempting(position=1, strategy_id="script"))
    session.record(InstallAttempt.failure("script", "step 1/1 (bash) Command failed (exit 22)"))
    session.advance(Attempting(position=2, strategy_id="homebrew"))
    session.record(InstallAttempt.skip("homebrew", "requires brew on PATH"))
    session.advance(Attempting(position=3, strategy_id="release-binary"))
    session.record(InstallAttempt.success("release-binary", "installed 0.4.1 at /usr/local/bin/mato"))
    session.advance(Succeeded(version="0.4.1", strategy_id="release-binary"))
    return session


class TestRenderSession:

    def test_lines(self):
        assert render_session(_finished_session()) == [
            "strategy=script result=fail detail=step 1/1 (bash) Command failed (exit 22)",
            "strategy=homebrew result=skip detail=requires brew on PATH",
            "strategy=release-binary result=ok detail=installed 0.4.1 at /usr/local/bin/mato",
            "status=installed:0.4.1",
        ]

    def test_multiline_detail_collapsed(self):
        line = render_attempt(InstallAttempt.failure("source", "error:\n  linker `cc` not found\n"))
        assert line == "strategy=source result=fail detail=error: linker `cc` not found"

    def test_empty_detail(self):
        assert render_attempt(InstallAttempt.skip("x")) == "strategy=x result=skip detail=-"

    def test_status_requires_terminal_session(self):
        with pytest.raises(ValueError):
            render_status(InstallSession())

    def test_exhausted(self):
        session = InstallSession()
        session.exhaust()
        assert render_session(session) == ["status=failed"]

    def test_environment_error(self):
        assert render_environment_error("Unsupported operating system 'Windows'\n") == [
            "error=environment_unknown detail=Unsupported operating system 'Windows'",
            "status=failed",
        ]


class TestJson:

    def test_session_to_dict(self):
        data = session_to_dict(_finished_session())
        assert data["status"] == "installed"
        assert data["exit_code"] == 0
        assert [a["result"] for a in data["attempts"]] == ["fail", "skip", "ok"]
        assert data["outcome"]["kind"] == "succeeded"
        assert data["transitions"][-1] == "Succeeded"


class TestVersionQuery:

    def test_resolved(self):
        q = VersionQuery(source="https://mato.sh/version.txt", value="0.4.1",
                         resolved_at="2026-01-01T00:00:00+00:00")
        assert render_version_query(q, "mr-kelly/mato") == [
            "source=https://mato.sh/version.txt resolved_at=2026-01-01T00:00:00+00:00",
            "release=https://github.com/mr-kelly/mato/releases/tag/v0.4.1",
            "status=version:0.4.1",
        ]

    def test_unknown(self):
        lines = render_version_query(VersionQuery(source="u"), "mr-kelly/mato")
        assert lines == [
            "source=u resolved_at=-",
            "release=https://github.com/mr-kelly/mato/releases/latest",
            "status=version:unknown",
        ]


class TestAgentPrompt:

    def test_fallback_steps_in_catalog_order(self):
        text = render_agent_prompt()
        lines = text.splitlines()
        assert lines[0] == "Install Mato on this machine and verify it works."
        headings = [ln for ln in lines if ln[:1].isdigit()]
        assert headings[0].startswith("1) Primary install path")
        assert headings[1].startswith("2) If that fails, fallback A (Homebrew)")
        assert headings[2].startswith("3) If Homebrew is unavailable/fails")
        assert headings[3].startswith("4) If binary install also fails")
        assert headings[4] == "5) Verification:"
        assert "continue with the next fallback automatically" in headings[5]

    def test_commands_present(self):
        text = render_agent_prompt()
        assert "curl -fsSL http://mato.sh/install.sh | bash" in text
        assert "   - brew tap mr-kelly/tap" in text
        assert "   - brew install mato" in text
        assert "cargo build --release" in text
        assert "   - run: mato --version" in text

    def test_disabled_strategy_left_out(self):
        text = render_agent_prompt(InstallerConfig(disabled=["homebrew"]))
        assert "brew tap" not in text
        assert "2) If Homebrew is unavailable/fails" in text


class TestHumanInstructions:

    def test_default(self):
        text = render_human_instructions()
        assert text.splitlines()[:2] == [
            "# Quick Install (Linux/macOS)",
            "curl -fsSL http://mato.sh/install.sh | bash",
        ]
        assert "brew tap mr-kelly/tap\nbrew install mato" in text
        assert "https://brew.sh/" in text

    def test_nothing_enabled(self):
        text = render_human_instructions(InstallerConfig(disabled=["script", "homebrew"]))
        assert text == "# Download a release: https://github.com/mr-kelly/mato/releases/latest"
