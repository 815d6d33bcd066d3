"""Record board CLI application.

Usage:
    recordboard csv template [--output template.csv]
    recordboard csv check <file>
    recordboard clubs list
    recordboard clubs use <club-slug>
    recordboard board <list-slug> [--club <club-slug>]
    recordboard import bulk <files...> [--club <club-slug>] [--course SCM] [--title "..."]
    recordboard export [<list-slug>] [--club <club-slug>] [--output out.csv]

The CLI talks to Supabase directly with the service role key, so it acts as
owner of every club.
"""

from pathlib import Path

import typer
from dotenv import load_dotenv

# Load .env file for Supabase keys
load_dotenv()
from rich.console import Console  # noqa: E402
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn  # noqa: E402
from rich.table import Table  # noqa: E402

from recordboard import configure_logging  # noqa: E402
from recordboard.config import get_settings  # noqa: E402
from recordboard.errors import RecordBoardError  # noqa: E402
from recordboard.models.club import Club, ClubWithRole, MemberRole  # noqa: E402
from recordboard.models.record_list import CourseType, RecordList  # noqa: E402
from recordboard.services.csv_parser import (  # noqa: E402
    generate_csv_template,
    parse_records_csv,
    summarize_errors,
)
from recordboard.services.import_schemas import ImportProgress  # noqa: E402
from recordboard.time_codec import format_ms_to_time  # noqa: E402

console = Console()
app = typer.Typer(
    name="recordboard",
    help="Swim club record boards CLI",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    configure_logging(level="DEBUG" if verbose else "WARNING")


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {message}[/red]")
    return typer.Exit(1)


def _read_text(path: Path) -> str:
    if not path.exists():
        raise _fail(f"File not found: {path}")
    return path.read_text(encoding="utf-8-sig")


def _print_errors(errors: list[str]) -> None:
    if not errors:
        return
    console.print(f"\n[yellow]{len(errors)} row(s) skipped:[/yellow]")
    for line in summarize_errors(errors, get_settings().max_csv_errors_shown):
        console.print(f"  [yellow]{line}[/yellow]")


# =============================================================================
# CSV COMMANDS (offline)
# =============================================================================

csv_app = typer.Typer(help="CSV template and validation", no_args_is_help=True)
app.add_typer(csv_app, name="csv")


@csv_app.command("template")
def csv_template(
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Print the CSV template (every column plus one example row)."""
    template = generate_csv_template()
    if output:
        output.write_text(template + "\n")
        console.print(f"[green]Template written to {output}[/green]")
    else:
        console.print(template, markup=False, highlight=False)


@csv_app.command("check")
def csv_check(
    file: Path = typer.Argument(..., help="CSV file to validate"),
    show: int = typer.Option(20, "--show", "-n", help="Rows to display"),
):
    """Parse a CSV file and show what would be imported."""
    result = parse_records_csv(_read_text(file))

    table = Table(title=f"{file.name}: {len(result.records)} record(s)")
    table.add_column("Row", style="dim", justify="right")
    table.add_column("Event", style="cyan")
    table.add_column("Time", justify="right")
    table.add_column("Swimmer")
    table.add_column("Date")
    table.add_column("Location")

    for row in result.records[:show]:
        table.add_row(
            str(row.row_number),
            row.event_name,
            format_ms_to_time(row.time_ms),
            row.swimmer_name,
            row.record_date or "-",
            row.location or "-",
        )
    console.print(table)
    if len(result.records) > show:
        console.print(f"[dim]...and {len(result.records) - show} more[/dim]")

    _print_errors(result.errors)
    if not result.records:
        raise typer.Exit(1)


# =============================================================================
# CLUB SELECTION
# =============================================================================

clubs_app = typer.Typer(help="Clubs and the selected club", no_args_is_help=True)
app.add_typer(clubs_app, name="clubs")


def _club_selection():
    from recordboard.dao import ClubDAO
    from recordboard.services.club_context import ClubSelection, FileSelectionStore

    memberships = [
        ClubWithRole(club=club, role=MemberRole.OWNER) for club in ClubDAO().get_all(limit=1000)
    ]
    return ClubSelection(memberships, FileSelectionStore())


def _resolve_club(slug: str | None) -> Club:
    """The club named by --club, or the selected one."""
    if slug:
        from recordboard.dao import ClubDAO

        club = ClubDAO().find_by_slug(slug)
        if club is None:
            raise _fail(f"Club not found: {slug}")
        return club

    club = _club_selection().selected
    if club is None:
        raise _fail("No clubs yet. Pass --club or create one first.")
    return club


def _resolve_list(club: Club, list_slug: str) -> RecordList:
    from recordboard.dao import RecordListDAO

    record_list = RecordListDAO().find_by_slug(club.id, list_slug)
    if record_list is None:
        raise _fail(f"Record list not found: {club.slug}/{list_slug}")
    return record_list


@clubs_app.command("list")
def clubs_list():
    """List clubs, marking the selected one."""
    try:
        selection = _club_selection()
    except RecordBoardError as e:
        raise _fail(e.detail) from None

    selected = selection.selected
    table = Table(title="Clubs")
    table.add_column("", width=1)
    table.add_column("Slug", style="cyan")
    table.add_column("Short Name")
    table.add_column("Full Name")
    for club in selection.clubs:
        marker = "*" if selected and club.id == selected.id else ""
        table.add_row(marker, club.slug, club.short_name, club.full_name)
    console.print(table)


@clubs_app.command("use")
def clubs_use(slug: str = typer.Argument(..., help="Club slug")):
    """Select the club later commands use by default."""
    try:
        selection = _club_selection()
        club = next((c for c in selection.clubs if c.slug == slug), None)
        if club is None:
            raise _fail(f"Club not found: {slug}")
        selection.select(club.id)
    except RecordBoardError as e:
        raise _fail(e.detail) from None
    console.print(f"[green]Selected {club.full_name} ({club.slug})[/green]")


# =============================================================================
# BOARD
# =============================================================================


@app.command("board")
def show_board(
    list_slug: str = typer.Argument(..., help="Record list slug"),
    club_slug: str | None = typer.Option(None, "--club", "-c", help="Club slug"),
    history: bool = typer.Option(True, "--history/--no-history", help="Show superseded records"),
):
    """Show a record list with its history."""
    from recordboard.services.record_service import RecordService

    try:
        club = _resolve_club(club_slug)
        record_list = _resolve_list(club, list_slug)
        board = RecordService().get_board(record_list.id)
    except RecordBoardError as e:
        raise _fail(e.detail) from None

    table = Table(title=f"{club.short_name} - {record_list}")
    table.add_column("Event", style="cyan")
    table.add_column("Time", justify="right")
    table.add_column("Swimmer")
    table.add_column("Date")
    table.add_column("Location")

    for entry in board:
        record = entry.record
        table.add_row(
            record.event_name,
            record.time_formatted or "-",
            record.swimmer_name or "-",
            record.record_date or "-",
            record.location or "-",
        )
        if history:
            for old in entry.history:
                table.add_row(
                    "",
                    f"[dim]{old.time_formatted or '-'}[/dim]",
                    f"[dim]{old.swimmer_name}[/dim]",
                    f"[dim]{old.record_date or '-'}[/dim]",
                    f"[dim]{old.location or '-'}[/dim]",
                )
    console.print(table)


# =============================================================================
# IMPORT
# =============================================================================

import_app = typer.Typer(help="Import records", no_args_is_help=True)
app.add_typer(import_app, name="import")


@import_app.command("bulk")
def import_bulk(
    files: list[Path] = typer.Argument(..., help="CSV files, one record list each"),
    club_slug: str | None = typer.Option(None, "--club", "-c", help="Club slug"),
    course: CourseType | None = typer.Option(None, "--course", help="Override course type"),
    title: str | None = typer.Option(None, "--title", "-t", help="List title (single file only)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Parse only, don't create lists"),
):
    """Create one record list per CSV file."""
    from recordboard.services.bulk_import import BulkImportService, prepare_file

    if title and len(files) > 1:
        raise _fail("--title can only be used with a single file")

    prepared = [prepare_file(path.name, _read_text(path)) for path in files]
    for staged in prepared:
        if title:
            staged.title = title
        if course:
            staged.course_type = course

    table = Table(title="Files")
    table.add_column("File", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Slug")
    table.add_column("Course")
    table.add_column("Records", justify="right")
    table.add_column("Errors", justify="right")
    for staged in prepared:
        table.add_row(
            staged.filename,
            staged.title,
            staged.slug,
            staged.course_type.value,
            str(len(staged.records)),
            str(len(staged.errors)) if staged.errors else "-",
        )
    console.print(table)

    if dry_run:
        for staged in prepared:
            if staged.errors:
                console.print(f"\n[bold]{staged.filename}[/bold]")
                _print_errors(staged.errors)
        return

    try:
        club = _resolve_club(club_slug)
    except RecordBoardError as e:
        raise _fail(e.detail) from None

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(f"Importing into {club.short_name}", total=len(prepared))

        def on_progress(update: ImportProgress) -> None:
            progress.update(task, completed=update.current)

        result = BulkImportService().run(club.id, prepared, on_progress=on_progress)

    for line in result.success:
        console.print(f"[green]  {line}[/green]")
    for line in result.failed:
        console.print(f"[red]  {line}[/red]")
    console.print(f"\n{result.summary()}")
    if result.failed:
        raise typer.Exit(1)


# =============================================================================
# EXPORT
# =============================================================================


@app.command("export")
def export_records(
    list_slug: str | None = typer.Argument(None, help="Record list slug (default: all lists)"),
    club_slug: str | None = typer.Option(None, "--club", "-c", help="Club slug"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Export records (current and history) as CSV."""
    from recordboard.services.export import ExportService

    try:
        club = _resolve_club(club_slug)
        service = ExportService()
        if list_slug:
            text = service.export_list(_resolve_list(club, list_slug).id)
        else:
            text = service.export_club(club.id)
    except RecordBoardError as e:
        raise _fail(e.detail) from None

    if output:
        output.write_text(text)
        console.print(f"[green]Exported to {output}[/green]")
    else:
        console.print(text, markup=False, highlight=False, end="")


if __name__ == "__main__":
    app()
