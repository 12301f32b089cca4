"""Command Line Interface for running MySQL statements."""

import logging
import sys
from typing import Optional, List, Any, Tuple

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from tabulate import tabulate

from ..config.settings import get_settings
from ..database.connection import DatabaseConnection, get_db_connection
from ..database.exceptions import MySQLQueryError
from ..database.formatting import fetch_assoc
from ..database.query import MySQLQuery

# Initialize CLI app
app = typer.Typer(
    name="mysqlquery",
    help="Run MySQL statements and report timing and statement statistics.",
    add_completion=False
)

# Rich console for beautiful output
console = Console()

# Global variables
db_connection: Optional[DatabaseConnection] = None
settings = None

MAX_DISPLAY_ROWS = 50


def setup_logging(debug: bool = False, benchmark: bool = False) -> None:
    """Set up logging configuration.

    The level comes from LOG_LEVEL unless debugging is requested. Benchmark
    timings are echoed to stdout even when the rest goes to the log file only.
    """
    app_settings = get_settings()
    debug = debug or app_settings.debug
    level = logging.DEBUG if debug else getattr(logging, app_settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('mysqlquery.log'),
            logging.StreamHandler(sys.stdout) if debug else logging.NullHandler()
        ]
    )

    if benchmark and not debug:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(message)s'))
        benchmark_logger = logging.getLogger('mysqlquery.database.query')
        benchmark_logger.setLevel(logging.INFO)
        benchmark_logger.addHandler(handler)


def resolve_format(output_format: Optional[str]) -> str:
    """Fall back to DEFAULT_OUTPUT_FORMAT when no --format was given."""
    return output_format or get_settings().default_output_format


def initialize_components(benchmark: bool = False) -> bool:
    """Open the database connection from the configured settings."""
    global db_connection, settings

    try:
        settings = get_settings()
        db_connection = get_db_connection()

        config = settings.connection_config()
        if benchmark:
            config['benchmark'] = True
        db_connection.initialize(config)

        console.print("[green]✓ Connected to database successfully[/green]")
        return True

    except MySQLQueryError as e:
        console.print(f"[red]Initialization failed: {e}[/red]")
        return False


def tabulate_results(results: List[Any]) -> Tuple[List[str], List[List[Any]]]:
    """Split normalized rows into column headers and value lists."""
    if not results:
        return [], []

    if not isinstance(results[0], dict):
        return ["Value"], [[value] for value in results]

    columns = [str(key) for key in results[0].keys()]
    rows = [list(row.values()) for row in results]
    return columns, rows


def display_results(query: MySQLQuery, output_format: str = "table") -> None:
    """Display the normalized results of a query in the specified format."""
    results = query.get_results()

    # Unformatted statement kinds (DESCRIBE, WITH ...) hand back their cursor
    if hasattr(results, 'fetchall'):
        results = fetch_assoc(results)
        query.close()

    if not isinstance(results, list):
        console.print(f"[green]✓ {query.type.upper() or 'Statement'} OK[/green] "
                      f"[dim](rows affected: {results})[/dim]")
        console.print(f"[dim]Executed in {query.duration:.4f} seconds[/dim]")
        return

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    columns, rows = tabulate_results(results)
    output_format = output_format.lower()

    if output_format == "json":
        import json
        console.print(json.dumps(results, indent=2, default=str))

    elif output_format == "csv":
        import csv
        import io
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(columns)
        writer.writerows(rows)
        console.print(output.getvalue())

    elif output_format == "plain":
        console.print(tabulate(rows, headers=columns, tablefmt="plain"))

    else:  # table format (default)
        table = Table(show_header=True, header_style="bold magenta")

        for column in columns:
            table.add_column(column)

        for row in rows[:MAX_DISPLAY_ROWS]:
            str_row = [str(val) if val is not None else "" for val in row]
            table.add_row(*str_row)

        console.print(table)

        if len(rows) > MAX_DISPLAY_ROWS:
            console.print(f"[yellow]Showing first {MAX_DISPLAY_ROWS} of {len(rows)} results[/yellow]")

    console.print(f"[dim]Executed in {query.duration:.4f} seconds[/dim]")


def display_stats(connection: DatabaseConnection) -> None:
    """Show statement counters and cumulative duration."""
    table = Table(title="Statement Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    for name, count in connection.get_stats().items():
        table.add_row(name.title(), str(count))
    table.add_row("Duration", f"{connection.get_duration():.4f}s")

    console.print(table)


def show_queries(connection: DatabaseConnection) -> None:
    """Show every statement executed in this session."""
    queries = connection.get_queries()
    if not queries:
        console.print("[yellow]No statements executed yet.[/yellow]")
        return

    table = Table(title="Executed Statements", show_header=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Type", style="magenta", width=8)
    table.add_column("Statement", style="cyan", max_width=60)
    table.add_column("Duration", style="dim")

    for i, entry in enumerate(queries, 1):
        table.add_row(str(i), entry['type'], entry['statement'], f"{entry['duration']:.4f}s")

    console.print(table)


def run_statement(statement: str, database: Optional[str], output_format: str) -> bool:
    """Execute one statement and print its results; returns False on failure."""
    try:
        query = MySQLQuery(statement, database=database, connection=db_connection)
    except MySQLQueryError as e:
        console.print(f"[red]Statement failed: {e}[/red]")
        return False

    display_results(query, output_format)
    return True


@app.command()
def execute(
    statements: List[str] = typer.Argument(..., help="SQL statements to run, in order"),
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database to select before running"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: table, json, csv, plain"),
    benchmark: bool = typer.Option(False, "--benchmark", "-b", help="Log the duration of every statement"),
    stats: bool = typer.Option(False, "--stats", "-s", help="Show statement statistics at the end"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging")
) -> None:
    """Execute one or more SQL statements."""
    setup_logging(debug, benchmark)
    output_format = resolve_format(output_format)

    if not initialize_components(benchmark):
        raise typer.Exit(1)

    for statement in statements:
        if not statement.strip():
            continue

        console.print(f"\n[bold]Statement:[/bold] {statement}")
        if not run_statement(statement, database, output_format):
            raise typer.Exit(1)

    if stats:
        console.print()
        display_stats(db_connection)


@app.command()
def interactive(
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database to select on start"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: table, json, csv, plain")
) -> None:
    """Start interactive mode for running statements one at a time."""
    setup_logging(False)
    output_format = resolve_format(output_format)

    if not initialize_components():
        raise typer.Exit(1)

    if database:
        try:
            db_connection.select_database(database)
        except MySQLQueryError as e:
            console.print(f"[red]Could not select database: {e}[/red]")
            raise typer.Exit(1)

    console.print(Panel.fit(
        "[bold blue]MySQL Query Interactive Mode[/bold blue]\n"
        "Enter SQL statements to run them against the connection.\n"
        "Commands: /help, /stats, /queries, /use <database>, /quit",
        border_style="blue"
    ))

    while True:
        try:
            statement = Prompt.ask("\n[bold cyan]mysql>[/bold cyan]", default="")

            if not statement.strip():
                continue

            if statement.startswith('/'):
                command, _, argument = statement.partition(' ')
                if command in ('/quit', '/exit'):
                    console.print("[yellow]Goodbye![/yellow]")
                    break
                elif command == '/help':
                    show_help()
                elif command == '/stats':
                    display_stats(db_connection)
                elif command == '/queries':
                    show_queries(db_connection)
                elif command == '/use':
                    if not argument.strip():
                        console.print("[red]Usage: /use <database>[/red]")
                    elif db_connection.select_database(argument.strip()):
                        console.print(f"[green]Database changed to {argument.strip()}[/green]")
                    else:
                        console.print(f"[yellow]Already using {argument.strip()}[/yellow]")
                else:
                    console.print("[red]Unknown command. Type /help for available commands.[/red]")
                continue

            run_statement(statement, None, output_format)

        except KeyboardInterrupt:
            console.print("\n[yellow]Goodbye![/yellow]")
            break
        except MySQLQueryError as e:
            console.print(f"[red]Error: {e}[/red]")


def show_help() -> None:
    """Show help information."""
    help_text = """
[bold]Available Commands:[/bold]
  /help            - Show this help message
  /stats           - Show statement counters
  /queries         - List executed statements with durations
  /use <database>  - Switch the selected database
  /quit            - Exit interactive mode

[bold]Example Statements:[/bold]
  - SHOW TABLES
  - SHOW VARIABLES LIKE 'version%'
  - SELECT * FROM users LIMIT 10
  - EXPLAIN SELECT * FROM users WHERE id = 1
    """
    console.print(Panel(help_text, title="Help", border_style="green"))


@app.command()
def test_connection() -> None:
    """Test database connection."""
    setup_logging(False)

    console.print("Testing database connection...")

    if initialize_components() and db_connection.test_connection():
        console.print("[green]✓ Database connection successful![/green]")
        if db_connection.database:
            console.print(f"Selected database: {db_connection.database}")
    else:
        console.print("[red]✗ Database connection failed![/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"MySQL Query CLI v{__version__}")


if __name__ == "__main__":
    app()
