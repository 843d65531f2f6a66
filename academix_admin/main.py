"""
AcademixStore Admin - console entry point

Usage:
    academix-admin login admin@example.edu
    academix-admin login principal@example.edu --college-id 42
    academix-admin books list --search algorithms
    academix-admin books add "Operating Systems" --year 2024 --semester 5 --pdf os.pdf
    academix-admin papers add "Data Structures" --subject CS201 --year 2 --semester 3 --pdf ds.pdf
    academix-admin students list --college-id 42
    academix-admin dashboard stats
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from academix_admin import __version__
from academix_admin.config import AdminConfig
from academix_admin.context import AppContext
from academix_admin.logging_config import setup_logging
from academix_admin.models.attachment import BOOK_COVER, BOOK_PDF, QUESTION_PAPER_PDF, AttachmentPayload
from academix_admin.models.book import Book, BookCategory, BookFilters
from academix_admin.models.question_paper import QuestionPaper, QuestionPaperFilters
from academix_admin.models.student import Student, StudentFilters
from academix_admin.notifications import ConsoleNotifier
from academix_admin.services.file_validation import validate_file_on_disk


console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        prog="academix-admin",
        description="AcademixStore Admin - manage books, question papers and students from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  academix-admin login admin@example.edu              Sign in as super admin
  academix-admin login me@example.edu --college-id 42 Sign in as college admin
  academix-admin status                               Show session status
  academix-admin books list --category Mathematics    List books
  academix-admin books upload BOOK_ID cover.png --cover
  academix-admin papers list --year 2 --semester 3    List question papers
  academix-admin students deactivate STUDENT_ID       Deactivate a student account
  academix-admin dashboard export-users users.csv     Download all users as CSV
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to config file"
    )

    parser.add_argument(
        "--server-url",
        type=str,
        help="Backend API base URL (overrides ACADEMIX_API_URL)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Login command
    login_parser = subparsers.add_parser("login", help="Sign in to the admin console")
    login_parser.add_argument("email", help="Account email")
    login_parser.add_argument("--password", "-p", help="Password (prompted when omitted)")
    login_parser.add_argument("--college-id", help="College ID for college admin sign-in")

    subparsers.add_parser("logout", help="Sign out and clear stored credentials")

    status_parser = subparsers.add_parser("status", help="Show authentication status")
    status_parser.add_argument("--verify", action="store_true", help="Confirm the token with the backend")

    # Books
    books_parser = subparsers.add_parser("books", help="Manage books")
    books_sub = books_parser.add_subparsers(dest="action", help="Book actions")

    books_list = books_sub.add_parser("list", help="List books")
    books_list.add_argument("--search", help="Search text")
    books_list.add_argument("--category", help="Category filter")
    books_list.add_argument("--year", type=int, help="Year filter")
    books_list.add_argument("--semester", type=int, help="Semester filter")
    books_list.add_argument("--page", type=int, default=1, help="Number of pages to load (default: 1)")

    books_add = books_sub.add_parser("add", help="Create a book and upload its files")
    books_add.add_argument("name", help="Book title")
    books_add.add_argument("--author")
    books_add.add_argument("--publisher")
    books_add.add_argument("--description")
    books_add.add_argument("--category")
    books_add.add_argument("--subject")
    books_add.add_argument("--year")
    books_add.add_argument("--semester", type=int)
    books_add.add_argument("--isbn")
    books_add.add_argument("--pdf", help="Path to the book PDF")
    books_add.add_argument("--cover", help="Path to the cover image")

    books_delete = books_sub.add_parser("delete", help="Delete a book")
    books_delete.add_argument("book_id")

    books_upload = books_sub.add_parser("upload", help="Upload a file to an existing book")
    books_upload.add_argument("book_id")
    books_upload.add_argument("file", help="Path to the file")
    books_upload.add_argument("--cover", action="store_true", help="Upload as cover image instead of PDF")

    # Question papers
    papers_parser = subparsers.add_parser("papers", help="Manage question papers")
    papers_sub = papers_parser.add_subparsers(dest="action", help="Question paper actions")

    papers_list = papers_sub.add_parser("list", help="List question papers")
    papers_list.add_argument("--search")
    papers_list.add_argument("--subject")
    papers_list.add_argument("--year", type=int)
    papers_list.add_argument("--semester", type=int)
    papers_list.add_argument("--page", type=int, default=1, help="Number of pages to load (default: 1)")

    papers_add = papers_sub.add_parser("add", help="Create a question paper and upload its PDF")
    papers_add.add_argument("title")
    papers_add.add_argument("--subject", required=True)
    papers_add.add_argument("--year", type=int, required=True)
    papers_add.add_argument("--semester", type=int, required=True)
    papers_add.add_argument("--exam-type")
    papers_add.add_argument("--description")
    papers_add.add_argument("--marks", type=int)
    papers_add.add_argument("--pdf", help="Path to the question paper PDF")

    papers_delete = papers_sub.add_parser("delete", help="Delete a question paper")
    papers_delete.add_argument("paper_id")

    students_parser = subparsers.add_parser("students", help="Manage student accounts")
    students_sub = students_parser.add_subparsers(dest="action", help="Student actions")

    students_list = students_sub.add_parser("list", help="List students")
    students_list.add_argument("--search")
    students_list.add_argument("--college-id")
    students_list.add_argument("--page", type=int, default=1, help="Number of pages to fetch")

    for action in ("activate", "deactivate"):
        toggle = students_sub.add_parser(action, help=f"{action.title()} a student account")
        toggle.add_argument("student_id")

    dashboard_parser = subparsers.add_parser("dashboard", help="Show dashboard figures")
    dashboard_sub = dashboard_parser.add_subparsers(dest="action", help="Dashboard actions")
    dashboard_sub.add_parser("stats", help="Show summary counts and recent activity")
    dashboard_export = dashboard_sub.add_parser("export-users", help="Download all users as CSV")
    dashboard_export.add_argument("output", help="Where to write the CSV file")

    return parser


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def _payload_from_file(purpose: str, file_path: str, config: AdminConfig) -> Optional[AttachmentPayload]:
    """Validate a local file and wrap it; prints the reason and returns None when invalid"""
    result = validate_file_on_disk(file_path, purpose, config.max_pdf_size_bytes)
    if not result.is_valid:
        console.print(f"[red]✗ {result.error_message}[/red]")
        return None
    return AttachmentPayload.from_path(purpose, file_path)


def books_table(books: List[Book]) -> Table:
    table = Table(title="Books", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Author")
    table.add_column("Year/Sem")
    table.add_column("PDF")
    table.add_column("Cover")
    table.add_column("Downloads", justify="right")
    for book in books:
        year_sem = f"{book.year or '-'}/{book.semester or '-'}"
        table.add_row(
            book.id,
            book.name,
            book.authorname or "",
            year_sem,
            "[green]✓[/green]" if book.has_pdf else "[dim]-[/dim]",
            "[green]✓[/green]" if book.has_cover else "[dim]-[/dim]",
            str(book.download_count),
        )
    return table


def papers_table(papers: List[QuestionPaper]) -> Table:
    table = Table(title="Question Papers", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Exam")
    table.add_column("Year/Sem")
    table.add_column("PDF")
    for paper in papers:
        table.add_row(
            paper.id,
            paper.title,
            paper.subject,
            paper.formatted_exam_type,
            paper.formatted_year_semester,
            "[green]✓[/green]" if paper.has_pdf else "[dim]-[/dim]",
        )
    return table


def students_table(students: List[Student]) -> Table:
    table = Table(title="Students", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Student ID")
    table.add_column("Year")
    table.add_column("Status")
    for student in students:
        table.add_row(
            student.id,
            student.full_name,
            student.email,
            student.student_id or "",
            student.year or "-",
            "[green]Active[/green]" if student.is_active else "[red]Inactive[/red]",
        )
    return table


async def cmd_login(context: AppContext, args: argparse.Namespace) -> bool:
    password = args.password or Prompt.ask("Password", password=True)
    return await context.auth.login(args.email, password, args.college_id)


async def cmd_logout(context: AppContext, args: argparse.Namespace) -> bool:
    await context.auth.logout()
    return True


async def cmd_status(context: AppContext, args: argparse.Namespace) -> bool:
    authenticated = context.auth.is_authenticated
    if authenticated and args.verify:
        authenticated = await context.auth.verify_current_token()

    if authenticated:
        role = context.access.current_role
        console.print(Panel(
            f"[green]Authenticated[/green]\n\n"
            f"[bold]User ID:[/bold] {context.auth.state.user_id or 'Unknown'}\n"
            f"[bold]Role:[/bold] {role.display_name if role else 'Unknown'}\n"
            f"[bold]Server:[/bold] {context.client.base_url}",
            title="Authentication Status",
            border_style="green"
        ))
    else:
        console.print(Panel(
            "[red]Not authenticated[/red]\n\n"
            "Please sign in using: [cyan]academix-admin login EMAIL[/cyan]",
            title="Authentication Status",
            border_style="red"
        ))
    return authenticated


async def _load_pages(controller, filters, pages: int) -> bool:
    await controller.load(filters, refresh=True)
    for _ in range(max(0, pages - 1)):
        if not controller.has_more:
            break
        await controller.load_more()
    return not controller.has_error


async def cmd_books(context: AppContext, args: argparse.Namespace) -> bool:
    books = context.books

    if args.action == "list":
        filters = BookFilters(
            search=args.search,
            category=BookCategory.from_string(args.category),
            year=args.year,
            semester=args.semester,
        )
        ok = await _load_pages(books, filters, args.page)
        if ok:
            console.print(books_table(books.items))
            console.print(f"[dim]Showing {len(books.items)} of {books.total_items}[/dim]")
        return ok

    if args.action == "add":
        attachments = []
        for purpose, path in ((BOOK_PDF.purpose, args.pdf), (BOOK_COVER.purpose, args.cover)):
            if path:
                payload = _payload_from_file(purpose, path, context.config)
                if payload is None:
                    return False
                attachments.append(payload)

        metadata = _compact({
            "name": args.name,
            "authorname": args.author,
            "publisher": args.publisher,
            "description": args.description,
            "category": args.category,
            "subject": args.subject,
            "year": args.year,
            "semester": args.semester,
            "isbn": args.isbn,
        })
        book = await books.create_with_attachments(metadata, attachments)
        if book is None:
            return False
        console.print(books_table([book]))
        report = books.last_upload_report
        return report is None or report.all_succeeded

    if args.action == "delete":
        return await books.delete(args.book_id)

    if args.action == "upload":
        purpose = BOOK_COVER.purpose if args.cover else BOOK_PDF.purpose
        payload = _payload_from_file(purpose, args.file, context.config)
        if payload is None:
            return False
        return await books.upload_attachment(args.book_id, payload)

    console.print("[yellow]Choose a books action: list, add, delete, upload[/yellow]")
    return False


async def cmd_papers(context: AppContext, args: argparse.Namespace) -> bool:
    papers = context.question_papers

    if args.action == "list":
        filters = QuestionPaperFilters(
            search=args.search,
            subject=args.subject,
            year=args.year,
            semester=args.semester,
        )
        ok = await _load_pages(papers, filters, args.page)
        if ok:
            console.print(papers_table(papers.items))
            console.print(f"[dim]Showing {len(papers.items)} of {papers.total_items}[/dim]")
        return ok

    if args.action == "add":
        pdf = None
        if args.pdf:
            pdf = _payload_from_file(QUESTION_PAPER_PDF.purpose, args.pdf, context.config)
            if pdf is None:
                return False

        metadata = _compact({
            "title": args.title,
            "subject": args.subject,
            "year": args.year,
            "semester": args.semester,
            "exam_type": args.exam_type.lower() if args.exam_type else None,
            "description": args.description,
            "marks": args.marks,
        })
        paper = await papers.create_with_pdf(metadata, pdf)
        if paper is None:
            return False
        console.print(papers_table([paper]))
        report = papers.last_upload_report
        return report is None or report.all_succeeded

    if args.action == "delete":
        return await papers.delete(args.paper_id)

    console.print("[yellow]Choose a papers action: list, add, delete[/yellow]")
    return False


async def cmd_students(context: AppContext, args: argparse.Namespace) -> bool:
    students = context.students

    if args.action == "list":
        filters = StudentFilters(search=args.search, college_id=args.college_id)
        ok = await _load_pages(students, filters, args.page)
        if ok:
            console.print(students_table(students.items))
            console.print(f"[dim]Showing {len(students.items)} of {students.total_items}[/dim]")
        return ok

    if args.action == "activate":
        return await students.activate(args.student_id)

    if args.action == "deactivate":
        return await students.deactivate(args.student_id)

    console.print("[yellow]Choose a students action: list, activate, deactivate[/yellow]")
    return False


async def cmd_dashboard(context: AppContext, args: argparse.Namespace) -> bool:
    dashboard = context.dashboard

    if args.action == "export-users":
        return await dashboard.export_users_csv(args.output)

    if not await dashboard.load():
        return False
    stats = dashboard.stats
    console.print(Panel(
        f"[bold]Users:[/bold] {stats.total_users} ({stats.active_users} active)\n"
        f"[bold]Students:[/bold] {stats.total_students}\n"
        f"[bold]Colleges:[/bold] {stats.total_colleges}\n"
        f"[bold]Revenue:[/bold] {stats.total_revenue or 0:,.2f}",
        title="Dashboard",
        border_style="cyan"
    ))
    for activity in dashboard.state.activities:
        when = activity.timestamp.strftime("%Y-%m-%d %H:%M") if activity.timestamp else ""
        console.print(f"[dim]{when}[/dim] {activity.user_name or ''} {activity.description or activity.action}")
    return True


COMMANDS = {
    "login": cmd_login,
    "logout": cmd_logout,
    "status": cmd_status,
    "books": cmd_books,
    "papers": cmd_papers,
    "students": cmd_students,
    "dashboard": cmd_dashboard,
}

PUBLIC_COMMANDS = ("login", "logout", "status")


async def run(args: argparse.Namespace, config: AdminConfig) -> bool:
    handler = COMMANDS[args.command]
    async with AppContext.create(config, notifier=ConsoleNotifier(console)) as context:
        if args.command not in PUBLIC_COMMANDS and not context.auth.is_authenticated:
            console.print("\n[red]✗ Authentication required[/red]")
            console.print("\nPlease sign in first:")
            console.print("  [cyan]academix-admin login EMAIL[/cyan]                  Super admin")
            console.print("  [cyan]academix-admin login EMAIL --college-id ID[/cyan]  College admin")
            return False
        return await handler(context, args)


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    config = AdminConfig.load_default(config_file=args.config)
    if args.server_url:
        config.api_base_url = args.server_url
    if args.verbose:
        config.log_level = "DEBUG"
    setup_logging(config)

    try:
        success = asyncio.run(run(args, config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
