from pathlib import Path

import pytest

from batch_analyzer.audit import AuditRunner, CommandResult
from batch_analyzer.config import Settings


class ScriptedCommandRunner:
    """Test double that replays scripted results and records every argv it receives."""

    def __init__(self, script: list[CommandResult | Exception] | None = None) -> None:
        self.script = list(script or [])
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def __call__(self, argv: list[str], *, timeout: float | None = None) -> CommandResult:
        self.calls.append(list(argv))
        self.timeouts.append(timeout)
        if not self.script:
            return CommandResult(returncode=0, stdout="", stderr="")
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    @property
    def urls(self) -> list[str]:
        return [argv[1] for argv in self.calls]

    @property
    def output_paths(self) -> list[str]:
        paths = []
        for argv in self.calls:
            paths.extend(arg.split("=", 1)[1] for arg in argv if arg.startswith("--output-path="))
        return paths


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "BATCH_ANALYZER_NAME",
        "BATCH_ANALYZER_REPORT_PREFIX",
        "BATCH_ANALYZER_FILENAME_STYLE",
        "BATCH_ANALYZER_AUDIT_COMMAND",
        "BATCH_ANALYZER_CHROME_FLAGS",
        "BATCH_ANALYZER_VIEW_REPORT",
        "BATCH_ANALYZER_AUDIT_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "reports").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        name="nightly",
        input_file=str(temp_workspace / "urls.txt"),
        reports_dir=str(temp_workspace / "reports"),
        report_prefix="report",
        filename_style="hash",
        log_level="INFO",
        audit_command="lighthouse",
        chrome_flags="--headless --no-sandbox --disable-cache",
        view_report=True,
        audit_timeout_seconds=None,
    )


@pytest.fixture()
def command_runner() -> ScriptedCommandRunner:
    return ScriptedCommandRunner()


@pytest.fixture()
def audit_runner(test_settings: Settings, command_runner: ScriptedCommandRunner) -> AuditRunner:
    return AuditRunner(test_settings, command_runner)
