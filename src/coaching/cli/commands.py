"""CLI commands for the coaching dashboard.

Roster:   students, add-student, select, remove-student
Exams:    exams, add-exam, edit-exam, delete-exam
Books:    books, add-book, book-status
Logs:     logs, add-log
Summary:  summary
Server:   serve

Each command opens the roster from the configured storage and saves it on exit.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console
from rich.table import Table

from coaching.config.app_config import load_app_config
from coaching.core import aggregator
from coaching.core.models import NET_LIMIT, BookStatus, Student
from coaching.core.roster import RosterStore

app = typer.Typer(
    name="yks",
    help="YKS coaching dashboard: exam nets, books and daily question counts.",
    no_args_is_help=True,
)

console = Console()

# Selection is CLI session state, kept next to (not inside) the roster blob
SELECTION_KEY = "yks-selected"

STATUS_COLORS = {
    BookStatus.NOT_STARTED: "red",
    BookStatus.IN_PROGRESS: "yellow",
    BookStatus.DONE: "green",
}


@contextmanager
def _open_store() -> Iterator[RosterStore]:
    """Open the configured roster, restoring the last CLI selection."""
    config = load_app_config()
    kv = config.storage.open_store()
    store = RosterStore.open(kv, key=config.storage.storage_key)

    selected = kv.get_item(SELECTION_KEY)
    if selected and store.get_student(selected) is not None:
        store.select_student(selected)

    try:
        yield store
    finally:
        store.close()
        if store.selected_id is not None:
            kv.set_item(SELECTION_KEY, store.selected_id)


def _resolve_student_or_exit(store: RosterStore, student_id: str | None) -> Student:
    """Get the given student, or the selected one, or exit with a hint."""
    if student_id is None:
        student = store.get_selected()
        if student is None:
            console.print("[yellow]Seçili öğrenci yok[/yellow]")
            console.print("  Kullanım: yks add-student <ad>  |  yks select <id>")
            raise typer.Exit(code=1)
        return student

    student = store.get_student(student_id)
    if student is None:
        console.print(f"[red]✗ Öğrenci bulunamadı: {student_id}[/red]")
        raise typer.Exit(code=1)
    return student


STUDENT_OPTION = typer.Option(None, "--student", "-s", help="Student ID (default: selected)")


# =============================================================================
# ROSTER
# =============================================================================


@app.command(name="students")
def list_students() -> None:
    """List all students."""
    with _open_store() as store:
        students = store.list_students()
        if not students:
            console.print("[yellow]Henüz öğrenci yok[/yellow]")
            console.print("  Kullanım: yks add-student <ad>")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("")
        table.add_column("ID")
        table.add_column("Öğrenci")
        table.add_column("Deneme", justify="right")
        table.add_column("Kitap", justify="right")
        table.add_column("Günlük", justify="right")
        for s in students:
            marker = "▶" if s.id == store.selected_id else ""
            table.add_row(
                marker,
                s.id,
                s.name,
                str(len(s.exam_results)),
                str(len(s.books)),
                str(len(s.daily_logs)),
            )
        console.print(table)


@app.command(name="add-student")
def add_student(name: str = typer.Argument(..., help="Student name")) -> None:
    """Add a student and select them."""
    with _open_store() as store:
        student = store.add_student(name)
        if student is None:
            console.print("[red]✗ Öğrenci adı boş olamaz[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ Öğrenci eklendi:[/green] {student.name} ({student.id})")


@app.command()
def select(student_id: str = typer.Argument(..., help="Student ID")) -> None:
    """Select the student used by default in other commands."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        store.select_student(student.id)
        console.print(f"[green]✓ Seçili öğrenci:[/green] {student.name}")


@app.command(name="remove-student")
def remove_student(
    student_id: str = typer.Argument(..., help="Student ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a student and all of their records (asks for confirmation)."""
    with _open_store() as store:
        student = store.request_student_delete(student_id)
        if student is None:
            console.print(f"[red]✗ Öğrenci bulunamadı: {student_id}[/red]")
            raise typer.Exit(code=1)

        if not yes:
            confirm = typer.confirm(
                f"'{student.name}' adlı öğrenciyi silmek istediğinizden emin misiniz? "
                "Bu işlem geri alınamaz."
            )
            if not confirm:
                store.cancel_student_delete()
                console.print("[yellow]İptal edildi[/yellow]")
                return

        store.confirm_student_delete()
        console.print(f"[green]✓ Öğrenci silindi:[/green] {student.name}")


# =============================================================================
# EXAMS
# =============================================================================


@app.command(name="exams")
def list_exams(student_id: str | None = STUDENT_OPTION) -> None:
    """Show exam results, newest first."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        exams = aggregator.sorted_exams(student.exam_results)
        if not exams:
            console.print(f"[yellow]{student.name} için deneme sonucu yok[/yellow]")
            return

        table = Table(show_header=True, header_style="bold", title=student.name)
        table.add_column("ID")
        table.add_column("Deneme Adı")
        table.add_column("Tarih")
        table.add_column("TYT Net", justify="right")
        table.add_column("AYT Net", justify="right")
        table.add_column("Toplam Net", justify="right")
        for e in exams:
            table.add_row(
                e.id,
                e.exam_name,
                aggregator.format_date(e.date),
                f"{e.tyt_net:.2f}",
                f"{e.ayt_net:.2f}",
                f"[bold]{e.total_net:.2f}[/bold]",
            )
        console.print(table)


@app.command(name="add-exam")
def add_exam(
    exam_name: str = typer.Argument(..., help="Exam name"),
    exam_date: str = typer.Argument(..., help="Exam date (YYYY-MM-DD)"),
    tyt: float = typer.Option(0.0, "--tyt", min=-NET_LIMIT, max=NET_LIMIT, help="TYT net"),
    ayt: float = typer.Option(0.0, "--ayt", min=-NET_LIMIT, max=NET_LIMIT, help="AYT net"),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Add an exam result."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        updated = aggregator.add_exam(student, exam_name, exam_date, tyt, ayt)
        if updated is student:
            console.print("[red]✗ Deneme adı ve tarihi gerekli[/red]")
            raise typer.Exit(code=1)
        store.update_student(updated)
        console.print(
            f"[green]✓ Deneme eklendi:[/green] {exam_name.strip()} "
            f"(toplam net {tyt + ayt:.2f})"
        )


@app.command(name="edit-exam")
def edit_exam(
    exam_id: str = typer.Argument(..., help="Exam ID"),
    exam_name: str | None = typer.Option(None, "--name", help="New exam name"),
    exam_date: str | None = typer.Option(None, "--date", help="New date (YYYY-MM-DD)"),
    tyt: float | None = typer.Option(
        None, "--tyt", min=-NET_LIMIT, max=NET_LIMIT, help="New TYT net"
    ),
    ayt: float | None = typer.Option(
        None, "--ayt", min=-NET_LIMIT, max=NET_LIMIT, help="New AYT net"
    ),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Edit an exam result. Total net is recomputed."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        if aggregator.find_exam(student, exam_id) is None:
            console.print(f"[red]✗ Deneme bulunamadı: {exam_id}[/red]")
            raise typer.Exit(code=1)

        updated = aggregator.edit_exam(
            student, exam_id, exam_name=exam_name, exam_date=exam_date, tyt_net=tyt, ayt_net=ayt
        )
        if updated is student:
            console.print("[red]✗ Deneme adı ve tarihi boş olamaz[/red]")
            raise typer.Exit(code=1)
        store.update_student(updated)

        exam = aggregator.find_exam(updated, exam_id)
        console.print(
            f"[green]✓ Deneme güncellendi:[/green] {exam.exam_name} "
            f"(toplam net {exam.total_net:.2f})"
        )


@app.command(name="delete-exam")
def delete_exam(
    exam_id: str = typer.Argument(..., help="Exam ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Delete an exam result (asks for confirmation)."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        exam = store.request_exam_delete(student.id, exam_id)
        if exam is None:
            console.print(f"[red]✗ Deneme bulunamadı: {exam_id}[/red]")
            raise typer.Exit(code=1)

        if not yes:
            confirm = typer.confirm(
                "Bu deneme sonucunu silmek istediğinizden emin misiniz? Bu işlem geri alınamaz."
            )
            if not confirm:
                store.cancel_exam_delete()
                console.print("[yellow]İptal edildi[/yellow]")
                return

        store.confirm_exam_delete()
        console.print(f"[green]✓ Deneme silindi:[/green] {exam.exam_name}")


# =============================================================================
# BOOKS
# =============================================================================


@app.command(name="books")
def list_books(student_id: str | None = STUDENT_OPTION) -> None:
    """Show tracked books."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        if not student.books:
            console.print(f"[yellow]{student.name} için kitap yok[/yellow]")
            return

        table = Table(show_header=True, header_style="bold", title=student.name)
        table.add_column("ID")
        table.add_column("Kitap Adı")
        table.add_column("Ders")
        table.add_column("Durum")
        for b in student.books:
            color = STATUS_COLORS[b.status]
            table.add_row(b.id, b.name, b.subject, f"[{color}]{b.status.value}[/{color}]")
        console.print(table)


@app.command(name="add-book")
def add_book(
    name: str = typer.Argument(..., help="Book name"),
    subject: str = typer.Argument(..., help="Subject"),
    status: str | None = typer.Option(
        None, "--status", help="Başlanmadı | Devam Ediyor | Bitti (default: Başlanmadı)"
    ),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Add a book to track."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        updated = aggregator.add_book(student, name, subject, status)
        if updated is student:
            console.print("[red]✗ Kitap adı, ders ve geçerli bir durum gerekli[/red]")
            raise typer.Exit(code=1)
        store.update_student(updated)
        book = updated.books[-1]
        console.print(f"[green]✓ Kitap eklendi:[/green] {book.name} ({book.status.value})")


@app.command(name="book-status")
def book_status(
    book_id: str = typer.Argument(..., help="Book ID"),
    status: str = typer.Argument(..., help="Başlanmadı | Devam Ediyor | Bitti"),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Change a book's reading status."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        if not any(b.id == book_id for b in student.books):
            console.print(f"[red]✗ Kitap bulunamadı: {book_id}[/red]")
            raise typer.Exit(code=1)

        parsed = BookStatus.parse(status)
        if parsed is None:
            console.print(f"[red]✗ Geçersiz durum: {status}[/red]")
            raise typer.Exit(code=1)

        store.update_student(aggregator.update_book_status(student, book_id, parsed))
        console.print(f"[green]✓ Kitap durumu:[/green] {parsed.value}")


# =============================================================================
# DAILY LOGS
# =============================================================================


@app.command(name="logs")
def list_logs(student_id: str | None = STUDENT_OPTION) -> None:
    """Show daily question logs, newest first."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        logs = aggregator.sorted_logs(student.daily_logs)
        if not logs:
            console.print(f"[yellow]{student.name} için soru kaydı yok[/yellow]")
            return

        table = Table(show_header=True, header_style="bold", title=student.name)
        table.add_column("Tarih")
        table.add_column("Dersler")
        table.add_column("Toplam Soru", justify="right")
        for log in logs:
            table.add_row(
                aggregator.format_date(log.date),
                ", ".join(f"{q.subject}: {q.count}" for q in log.questions),
                f"[bold]{log.total_questions}[/bold]",
            )
        console.print(table)


@app.command(name="add-log")
def add_log(
    log_date: str = typer.Argument(..., help="Date (YYYY-MM-DD)"),
    turkce: int = typer.Option(0, "--turkce", help="Türkçe questions"),
    matematik: int = typer.Option(0, "--matematik", help="Matematik questions"),
    fen: int = typer.Option(0, "--fen", help="Fen Bilimleri questions"),
    sosyal: int = typer.Option(0, "--sosyal", help="Sosyal Bilimler questions"),
    student_id: str | None = STUDENT_OPTION,
) -> None:
    """Record one day's question counts."""
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        updated = aggregator.add_daily_log(
            student, log_date, turkce=turkce, matematik=matematik, fen=fen, sosyal=sosyal
        )
        if updated is student:
            console.print("[yellow]En az bir derste soru sayısı girin[/yellow]")
            raise typer.Exit(code=1)
        store.update_student(updated)
        log = updated.daily_logs[-1]
        console.print(f"[green]✓ Soru kaydı eklendi:[/green] {log.total_questions} soru")


# =============================================================================
# SUMMARY
# =============================================================================


def _print_chart(title: str, series: list[tuple[str, float]]) -> None:
    console.print(f"\n[bold]{title}[/bold]")
    for label, value in series:
        console.print(f"  {label:>7}  {value:7.2f}")


@app.command()
def summary(student_id: str | None = STUDENT_OPTION) -> None:
    """Show dashboard statistics and net progress."""
    dashboard = load_app_config().dashboard
    with _open_store() as store:
        student = _resolve_student_or_exit(store, student_id)
        stats = aggregator.summarize(
            student,
            min_chart_points=dashboard.min_chart_points,
            not_applicable=dashboard.not_applicable,
        )

        console.print(f"\n[bold]{student.name}[/bold] - Öğrenci Gelişim Paneli\n")
        console.print(f"  [dim]Ortalama Günlük Soru:[/dim] {stats.average_daily_questions}")
        console.print(f"  [dim]Ortalama TYT Neti:[/dim]    {stats.average_tyt_net}")
        console.print(f"  [dim]Ortalama AYT Neti:[/dim]    {stats.average_ayt_net}")
        console.print(f"  [dim]Takip Edilen Kitap:[/dim]   {stats.active_book_count}")

        chart = stats.exam_chart
        if not chart.sufficient:
            console.print(f"\n[dim]{chart.message}[/dim]")
            return
        _print_chart("TYT Net Gelişimi", chart.tyt_series)
        _print_chart("AYT Net Gelişimi", chart.ayt_series)


# =============================================================================
# WEB SERVER
# =============================================================================


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Port"),
) -> None:
    """Run the web API."""
    import uvicorn

    uvicorn.run("coaching.web.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
