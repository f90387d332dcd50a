from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ReportTarget:
    filename: str
    path: Path


@dataclass(frozen=True)
class AuditSuccess:
    url: str
    report_path: Path


@dataclass(frozen=True)
class AuditFailure:
    url: str
    diagnostic: str
    returncode: int | None = None


AuditOutcome = AuditSuccess | AuditFailure


@dataclass(frozen=True)
class BatchResult:
    name: str
    timestamp: str
    output_dir: Path
    outcomes: tuple[AuditOutcome, ...]

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if isinstance(outcome, AuditSuccess))

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if isinstance(outcome, AuditFailure))


@dataclass(frozen=True)
class ReportRun:
    name: str
    timestamp: str
    full_name: str
    path: Path
    reports: tuple[str, ...]
    info: str | None = None


@dataclass
class ReportCollection:
    name: str
    runs: list[ReportRun] = field(default_factory=list)

    @property
    def last_run(self) -> ReportRun | None:
        return self.runs[0] if self.runs else None
