"""Typer based command line entry points for RosterFlow."""

from __future__ import annotations

from datetime import date
import json
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import typer

from rosterflow.core.errors import ConfigError, RosterFlowError
from rosterflow.core.logger import get_logger, set_level
from rosterflow.core.profiles import RunProfile, SheetProfile, ensure_work_dirs, load_run_profile
from rosterflow.services.roster import (
    SheetSelection,
    detect_structure,
    generate_roster,
    load_rules,
    parse_holiday_notes,
)
from rosterflow_io.excel_reader import load_template
from rosterflow_io.excel_writer import DEFAULT_TITLE

STAFF_SEPARATORS = (",", "、", "，")

app = typer.Typer(help="Generate monthly duty-roster workbooks from a spreadsheet template.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    get_logger()
    try:
        set_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _fail(exc: RosterFlowError) -> NoReturn:
    logger = get_logger()
    logger.error("%s: %s", type(exc).__name__, exc)
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    code = 2 if isinstance(exc, ConfigError) else 1
    raise typer.Exit(code=code) from exc


def _split_names(raw: str) -> list[str]:
    names = [raw]
    for sep in STAFF_SEPARATORS:
        names = [part for chunk in names for part in chunk.split(sep)]
    return [name.strip() for name in names if name.strip()]


def _parse_staff_option(item: str) -> Tuple[str, list[str]]:
    """Parse ``SHEET=甲,乙`` into the sheet name and its ordered staff list."""

    sheet, sep, names = item.partition("=")
    if not sep or not sheet.strip():
        raise typer.BadParameter(f"Invalid --staff value (expected SHEET=NAME,NAME): {item}")
    return sheet.strip(), _split_names(names)


def _print_progress(text: str, percent: float) -> None:
    typer.secho(f"{percent:5.1f}% {text}", err=True)


@app.command("sheets")
def cli_sheets(
    template: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Template workbook"),
) -> None:
    """List the worksheet names of a template."""

    try:
        workbook = load_template(template)
    except RosterFlowError as exc:
        _fail(exc)
    try:
        for name in workbook.sheet_names:
            typer.echo(name)
    finally:
        workbook.close()


@app.command("rules")
def cli_rules(
    rules: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Rules CSV/Excel file"),
) -> None:
    """Preview the monthly rules table (the 合計 summary row is omitted)."""

    try:
        table = load_rules(rules)
    except RosterFlowError as exc:
        _fail(exc)
    for row in table.preview_rows():
        month = f"{row.month:>2}" if row.month else " ?"
        typer.echo(f"{month} {row.label}\t{row.total_leave_days or '-'}\t{row.notes or '-'}")


@app.command("inspect")
def cli_inspect(
    template: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Template workbook"),
    sheets: List[str] = typer.Option([], "--sheet", "-s", help="Worksheet to inspect (repeatable); default all"),
) -> None:
    """Print the detected structure of each worksheet as JSON."""

    try:
        workbook = load_template(template)
    except RosterFlowError as exc:
        _fail(exc)
    payload: dict[str, object] = {}
    try:
        for name in sheets or workbook.sheet_names:
            worksheet = workbook.worksheet(name)
            if worksheet is None:
                raise typer.BadParameter(f"Worksheet not found: {name}", param_hint="--sheet")
            payload[name] = detect_structure(worksheet, workbook.cached_worksheet(name)).to_dict()
    finally:
        workbook.close()
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.command("holidays")
def cli_holidays(
    month: int = typer.Option(..., "--month", "-m", min=1, max=12, help="Target month"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Free-text holiday notes"),
    rules: Optional[Path] = typer.Option(
        None, "--rules", exists=True, dir_okay=False, resolve_path=True, help="Take the notes from a rules file"
    ),
) -> None:
    """Show the day -> label map parsed from holiday notes."""

    if notes is None and rules is None:
        raise typer.BadParameter("Provide --notes or --rules")
    if notes is None:
        try:
            rule = load_rules(rules).lookup(month)  # type: ignore[arg-type]
        except RosterFlowError as exc:
            _fail(exc)
        notes = rule.notes if rule else ""
    holidays = parse_holiday_notes(notes, month)
    for day in sorted(holidays):
        typer.echo(f"{month}/{day}\t{holidays[day]}")


def _profile_from_options(
    template: Optional[Path],
    rules: Optional[Path],
    year: Optional[int],
    month: Optional[int],
    sheets: List[str],
    staff: List[str],
    title: str,
) -> RunProfile:
    if template is None or rules is None:
        raise typer.BadParameter("Provide --profile or both --template and --rules")
    staff_map = dict(_parse_staff_option(item) for item in staff)
    sheet_names = list(dict.fromkeys(sheets + list(staff_map)))
    if not sheet_names:
        raise typer.BadParameter("Select at least one worksheet with --sheet", param_hint="--sheet")
    today = date.today()
    try:
        return RunProfile(
            template=template,
            rules=rules,
            year=year or today.year,
            month=month or today.month,
            title=title,
            sheets=[SheetProfile(name=name, staff=staff_map.get(name, [""])) for name in sheet_names],
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("generate")
def cli_generate(
    profile: Optional[Path] = typer.Option(
        None, "--profile", "-p", exists=True, dir_okay=False, resolve_path=True, help="Run profile YAML"
    ),
    template: Optional[Path] = typer.Option(
        None, "--template", "-t", exists=True, dir_okay=False, resolve_path=True, help="Template workbook"
    ),
    rules: Optional[Path] = typer.Option(
        None, "--rules", "-r", exists=True, dir_okay=False, resolve_path=True, help="Rules CSV/Excel file"
    ),
    year: Optional[int] = typer.Option(None, "--year", "-y", min=1900, max=9999, help="Target year (default: this year)"),
    month: Optional[int] = typer.Option(None, "--month", "-m", min=1, max=12, help="Target month (default: this month)"),
    sheets: List[str] = typer.Option([], "--sheet", "-s", help="Worksheet to fill, in order (repeatable)"),
    staff: List[str] = typer.Option([], "--staff", help="Staff list per sheet as SHEET=NAME,NAME (repeatable)"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", resolve_path=True, help="Directory for the workbook"),
    title: str = typer.Option(DEFAULT_TITLE, "--title", help="Title used in the output file name"),
    report: bool = typer.Option(False, "--report/--no-report", help="Write a Markdown summary next to the workbook"),
) -> None:
    """Fill the selected worksheets for the target month and save a new workbook."""

    logger = get_logger()

    if profile is not None:
        try:
            run = load_run_profile(profile)
        except ConfigError as exc:
            _fail(exc)
    else:
        run = _profile_from_options(template, rules, year, month, sheets, staff, title)

    out_dir = output_dir or run.output_dir or ensure_work_dirs()["out"]
    write_report = report or run.report
    selections: list[SheetSelection] = run.selections()

    try:
        result = generate_roster(
            run.template,
            run.rules,
            run.year,
            run.month,
            selections,
            out_dir,
            title=run.title,
            write_report=write_report,
            progress_cb=_print_progress,
        )
    except RosterFlowError as exc:
        _fail(exc)

    typer.echo("Generation finished")
    typer.echo(f"Target: {result.year} 年 {result.month} 月 ({result.days_in_month} days)")
    typer.echo(f"Sheets: {', '.join(result.processed_sheets) or '-'}")
    if result.skipped_sheets:
        typer.secho(f"Missing sheets skipped: {', '.join(result.skipped_sheets)}", fg=typer.colors.YELLOW)
    typer.echo(f"Total leave days: {result.total_leave_days or '-'}")
    typer.echo(f"Output: {result.output_path}")
    if result.report_path:
        typer.echo(f"Report: {result.report_path}")
    logger.info("CLI generation completed: output=%s", result.output_path)


if __name__ == "__main__":
    app()
