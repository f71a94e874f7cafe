"""CLI interface for dirstat."""

import logging
import sys
from pathlib import Path

import click

from dirstat.config import Config, ConfigError, DEFAULT_LONG_PATH_THRESHOLD, ScannerConfig
from dirstat.patterns import PatternFileError, PatternSet, load_pattern_file
from dirstat.report import OutputWriteError, write_report
from dirstat.roots import RootListError, load_root_list
from dirstat.scanner import ProgressReporter, ScanOrchestrator, ScanRoot, TreeWalker

FATAL_ERRORS = (ConfigError, PatternFileError, RootListError, OutputWriteError)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    required=False,
)
@click.option(
    "-l",
    "--list",
    "list_file",
    type=click.Path(path_type=Path),
    help="Read directories to scan from a file (JSON array or one path per line)",
)
@click.option(
    "-m",
    "--match",
    "match_file",
    type=click.Path(path_type=Path),
    help="Read name/path patterns from a file; only the first matching pattern is reported",
)
@click.option("-na", "--no-age", is_flag=True, help="Leave out file age statistics")
@click.option("-ne", "--no-ext", is_flag=True, help="Leave out file extension statistics")
@click.option(
    "-pe",
    "--pattern-ext",
    is_flag=True,
    help="Only count extensions of files that match a pattern",
)
@click.option(
    "-gs",
    "--group-on-subdir",
    is_flag=True,
    help="Report subdirectories immediately below DIRECTORY separately",
)
@click.option(
    "-o",
    "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("data.json"),
    show_default=True,
    help="File the JSON results are written to",
)
@click.option("-f", "--format-json", is_flag=True, help="Indent the JSON output")
@click.option(
    "--long-path",
    type=int,
    default=DEFAULT_LONG_PATH_THRESHOLD,
    show_default=True,
    help="Report paths longer than this many characters",
)
@click.option("-w", "--workers", type=int, default=1, show_default=True, help="Roots scanned in parallel")
@click.option("--progress-interval", type=int, default=10000, help="Print progress to stderr every N files")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    directory: str | None,
    list_file: Path | None,
    match_file: Path | None,
    no_age: bool,
    no_ext: bool,
    pattern_ext: bool,
    group_on_subdir: bool,
    output_file: Path,
    format_json: bool,
    long_path: int,
    workers: int,
    progress_interval: int,
    verbose: bool,
) -> None:
    """Analyze files and directories below DIRECTORY.

    Collects total size, file and directory counts, the largest file, long
    paths, unreadable directories, per-extension totals, file age histograms
    and pattern matches, and writes them as JSON.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if directory is None and list_file is None:
        raise click.UsageError("No directory specified")

    config = Config(
        output_path=output_file,
        format_json=format_json,
        workers=workers,
        scanner=ScannerConfig(
            long_path_threshold=long_path,
            analyze_age=not no_age,
            analyze_extensions=not no_ext,
            extensions_for_matches_only=pattern_ext,
            progress_interval=progress_interval,
        ),
    )

    try:
        config.validate()
        roots = load_root_list(list_file) if list_file else []
        if directory:
            roots.append(ScanRoot(directory, expand_children=group_on_subdir))
        patterns = load_pattern_file(match_file) if match_file else PatternSet()

        progress = ProgressReporter(interval=config.scanner.progress_interval)
        walker = TreeWalker(patterns, config.scanner, progress=progress)
        orchestrator = ScanOrchestrator(walker, workers=config.workers, progress=progress)
        results = orchestrator.run(roots)

        write_report(results, config.output_path, indent=2 if config.format_json else None)
    except FATAL_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nScan interrupted.", err=True)
        sys.exit(130)

    click.echo(f"Results written to {config.output_path}")


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
