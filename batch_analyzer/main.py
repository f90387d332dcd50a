import argparse
import logging

from batch_analyzer.audit import LaunchFailure
from batch_analyzer.config import ConfigurationError, get_log_level, get_settings
from batch_analyzer.pipeline import BatchRunner
from batch_analyzer.run_store import group_runs, list_runs
from batch_analyzer.step_logic import DirectoryError, InputUnavailableError


logger = logging.getLogger("batch_analyzer")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Lighthouse audits for a list of URLs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="audit every URL of an input file")
    run_parser.add_argument(
        "-n",
        "--name",
        required=False,
        help="Run name used for the output directory; BATCH_ANALYZER_NAME takes precedence",
    )
    run_parser.add_argument("-f", "--file", default="urls.txt", help="File with one URL per line")
    run_parser.add_argument("-r", "--reports-dir", default="reports", help="Directory where run folders are created")
    run_parser.add_argument(
        "-p",
        "--prefix",
        default=None,
        help="Report file name prefix (default: report); BATCH_ANALYZER_REPORT_PREFIX takes precedence",
    )

    list_parser = subparsers.add_parser("list", help="list previous runs and their reports")
    list_parser.add_argument("-r", "--reports-dir", default="reports", help="Directory holding run folders")

    return parser.parse_args(argv)


def _run(args: argparse.Namespace) -> None:
    try:
        settings = get_settings(
            name=args.name,
            input_file=args.file,
            reports_dir=args.reports_dir,
            report_prefix=args.prefix,
        )
    except ConfigurationError as exc:
        configure_logging(get_log_level())
        logger.error("configuration error: %s", exc)
        raise SystemExit(1) from exc

    configure_logging(settings.log_level)
    logger.info("using run name %s and report prefix %s", settings.name, settings.report_prefix)

    runner = BatchRunner(settings)
    try:
        result = runner.run()
    except (DirectoryError, InputUnavailableError, LaunchFailure) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    print(
        "name={name} output_dir={output_dir} attempted={attempted} succeeded={succeeded} failed={failed}".format(
            name=result.name,
            output_dir=result.output_dir,
            attempted=result.attempted,
            succeeded=result.succeeded,
            failed=result.failed,
        )
    )


def _list(args: argparse.Namespace) -> None:
    collections = group_runs(list_runs(args.reports_dir))
    if not collections:
        print(f"no runs found in '{args.reports_dir}'")
        return

    for collection in collections:
        for run in collection.runs:
            print(
                "name={name} timestamp={timestamp} reports={reports} path={path}".format(
                    name=run.name,
                    timestamp=run.timestamp,
                    reports=len(run.reports),
                    path=run.path,
                )
            )


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    if args.command == "list":
        configure_logging(get_log_level())
        _list(args)
        return
    _run(args)


if __name__ == "__main__":
    main()
