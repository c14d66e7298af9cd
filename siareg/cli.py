"""
Command-line interface for searching the public register.

Uses typer for clean CLI with subcommands.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from loguru import logger

from siareg.contexts.registry import AnomalyLogDiagnostics, License, Query
from siareg.contexts.scraping import search_sync
from siareg.contexts.scraping.errors import DispatchError, EmptyQueryError, ParseError

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

EXIT_DISPATCH_FAILED = 1
EXIT_PARSE_FAILED = 2
EXIT_EMPTY_QUERY = 3

app = typer.Typer(
    add_completion=False,
    help="Search the SIA public register of licence holders",
)


def _setup_logger(log_dir: Path = LOGS_PATH, quiet: bool = False) -> Path:
    """
    Configure loguru to write to timestamped log file.

    Args:
        log_dir: Directory for log files (default: LOGS_PATH from environment)
        quiet: Only show warnings and errors on the console

    Returns:
        Path to the created log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"search_{timestamp}.txt"

    logger.remove()  # Remove default stderr handler
    logger.add(log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}")
    logger.add(
        lambda msg: typer.echo(msg, nl=False, err=True),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}\n",
        level="WARNING" if quiet else "INFO",
    )

    return log_file


def _print_licenses(licenses: List[License], as_json: bool):
    if as_json:
        typer.echo(json.dumps([lic.to_dict() for lic in licenses], indent=2))
        return

    if not licenses:
        typer.secho("No licenses found.", fg=typer.colors.YELLOW)
        return

    for lic in licenses:
        typer.echo(str(lic))


def _run_search(query: Query, as_json: bool, quiet: bool, anomaly_log: bool, log_dir: Path):
    log_file = _setup_logger(log_dir, quiet=quiet)
    logger.info(f"Logging to: {log_file}")

    diagnostics = AnomalyLogDiagnostics(log_dir) if anomaly_log else None

    try:
        licenses = search_sync(query, diagnostics=diagnostics)
    except EmptyQueryError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_EMPTY_QUERY)
    except DispatchError as e:
        logger.error(f"Register unreachable: {e}")
        raise typer.Exit(code=EXIT_DISPATCH_FAILED)
    except ParseError as e:
        logger.error(f"Could not parse register response, the page layout may have changed: {e}")
        raise typer.Exit(code=EXIT_PARSE_FAILED)

    logger.success(f"Search complete: {len(licenses)} license(s) found")
    _print_licenses(licenses, as_json)


@app.command("name")
def name_command(
    last_name: Optional[str] = typer.Option(None, "--last-name", "-l", help="Surname"),
    first_name: Optional[str] = typer.Option(None, "--first-name", "-f", help="First name"),
    middle_name: Optional[str] = typer.Option(None, "--middle-name", "-m", help="Middle name"),
    dob: Optional[str] = typer.Option(None, "--dob", help="Date of birth, e.g. 01/01/1970"),
    role: Optional[str] = typer.Option(None, "--role", help="Licence role, e.g. 'Front Line'"),
    sector: Optional[str] = typer.Option(
        None, "--sector", help="Licence sector, e.g. 'Door Supervision'"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    anomaly_log: bool = typer.Option(
        False, "--anomaly-log", help="Record data-quality anomalies to the logs directory"
    ),
    log_dir: Path = typer.Option(LOGS_PATH, "--log-dir", help="Directory for log files"),
):
    """
    Search the register by name.

    Examples:

        $ siareg name --last-name Smith --first-name John

        $ siareg name -l Smith --sector "Door Supervision" --json
    """
    query = Query()
    if last_name is not None:
        query = query.with_last_name(last_name)
    if first_name is not None:
        query = query.with_first_name(first_name)
    if middle_name is not None:
        query = query.with_middle_name(middle_name)
    if dob is not None:
        query = query.with_date_of_birth(dob)
    if role is not None:
        query = query.with_role(role)
    if sector is not None:
        query = query.with_license_sector(sector)

    _run_search(query, as_json, quiet, anomaly_log, log_dir)


@app.command("license")
def license_command(
    license_no: str = typer.Argument(..., help="16 digit licence number"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    anomaly_log: bool = typer.Option(
        False, "--anomaly-log", help="Record data-quality anomalies to the logs directory"
    ),
    log_dir: Path = typer.Option(LOGS_PATH, "--log-dir", help="Directory for log files"),
):
    """Search the register by licence number."""
    _run_search(Query().with_license_no(license_no), as_json, quiet, anomaly_log, log_dir)


if __name__ == "__main__":
    app()
