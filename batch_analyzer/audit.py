from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
from typing import Protocol

from batch_analyzer.config import Settings
from batch_analyzer.schemas import AuditFailure, AuditOutcome, AuditSuccess


logger = logging.getLogger(__name__)


class LaunchFailure(RuntimeError):
    pass


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


class CommandRunner(Protocol):
    def __call__(self, argv: list[str], *, timeout: float | None = None) -> CommandResult: ...


class SubprocessCommandRunner:
    """Runs a command to completion and captures its output.

    Raises ``OSError`` when the executable cannot be spawned and
    ``subprocess.TimeoutExpired`` when ``timeout`` elapses.
    """

    def __call__(self, argv: list[str], *, timeout: float | None = None) -> CommandResult:
        proc = subprocess.run(
            argv,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
        return CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


class AuditRunner:
    def __init__(self, settings: Settings, command_runner: CommandRunner | None = None) -> None:
        self.settings = settings
        self.command_runner = command_runner or SubprocessCommandRunner()

    def build_command(self, url: str, output_path: Path) -> list[str]:
        argv = [
            self.settings.audit_command,
            url,
            "--output=html",
            f"--output-path={output_path}",
        ]
        if self.settings.view_report:
            argv.append("--view")
        argv.append(f"--chrome-flags={self.settings.chrome_flags}")
        return argv

    def run(self, url: str, output_path: Path) -> AuditOutcome:
        argv = self.build_command(url, output_path)
        timeout = self.settings.audit_timeout_seconds
        try:
            result = self.command_runner(argv, timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("audit timed out", extra={"url": url, "timeout_seconds": timeout})
            return AuditFailure(url=url, diagnostic=f"audit timed out after {timeout:g} seconds")
        except OSError as exc:
            raise LaunchFailure(
                f"failed to execute '{self.settings.audit_command}': {exc}. Is it installed and on PATH?"
            ) from exc

        if result.returncode != 0:
            return AuditFailure(url=url, diagnostic=result.stderr.strip(), returncode=result.returncode)
        return AuditSuccess(url=url, report_path=output_path)
