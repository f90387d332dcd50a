from contextlib import closing
from datetime import datetime
import logging
from pathlib import Path

from batch_analyzer.audit import AuditRunner
from batch_analyzer.config import Settings
from batch_analyzer.schemas import AuditFailure, AuditOutcome, BatchResult, ReportTarget
from batch_analyzer.step_logic import derive_filename, ensure_output_dir, read_entries, write_run_info


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class BatchRunner:
    def __init__(self, settings: Settings, audit_runner: AuditRunner | None = None) -> None:
        self.settings = settings
        self.audit_runner = audit_runner or AuditRunner(settings)

    def run(self, *, timestamp: str | None = None) -> BatchResult:
        """Audit every URL of the input file once, in file order.

        ``DirectoryError``, ``InputUnavailableError`` and ``LaunchFailure``
        propagate to the caller. A failed audit is recorded and the loop moves on.
        """
        timestamp = timestamp or datetime.now().strftime(TIMESTAMP_FORMAT)
        output_dir = ensure_output_dir(self.settings.reports_dir, self.settings.name, timestamp)

        entries = read_entries(self.settings.input_file)
        logger.info("reading urls", extra={"input_file": self.settings.input_file})

        outcomes: list[AuditOutcome] = []
        with closing(entries):
            for line_number, url in enumerate(entries, start=1):
                if not url:
                    continue
                logger.info("analyzing url (line %d): %s", line_number, url)

                target = self._report_target(url, output_dir)
                outcome = self.audit_runner.run(url, target.path)
                outcomes.append(outcome)

                if isinstance(outcome, AuditFailure):
                    logger.error(
                        "audit failed for url %s: %s",
                        url,
                        outcome.diagnostic or "<no diagnostic output>",
                        extra={"returncode": outcome.returncode},
                    )
                else:
                    logger.info("generated report: %s", outcome.report_path)

        result = BatchResult(
            name=self.settings.name,
            timestamp=timestamp,
            output_dir=output_dir,
            outcomes=tuple(outcomes),
        )
        write_run_info(result, self.settings.input_file)
        logger.info(
            "analysis complete",
            extra={"output_dir": str(output_dir), "succeeded": result.succeeded, "failed": result.failed},
        )
        return result

    def _report_target(self, url: str, output_dir: Path) -> ReportTarget:
        filename = derive_filename(url, self.settings.report_prefix, style=self.settings.filename_style)
        return ReportTarget(filename=filename, path=output_dir / filename)
