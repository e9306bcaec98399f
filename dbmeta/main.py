"""
dbmeta CLI Entry Point

Command-line interface for browsing schema metadata and rendering DDL.
"""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError

from dbmeta.config import Settings, get_settings, load_settings
from dbmeta.ddl import DialectRegistry
from dbmeta.exceptions import DbMetaError
from dbmeta.introspection import SchemaIntrospector
from dbmeta.models.schema import DatabaseType, TableType
from dbmeta.utils.logger import setup_logging

app = typer.Typer(
    name="dbmeta",
    help="dbmeta - Database schema introspection and DDL generation",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

EnvOption = typer.Option(None, "--env", "-e", help="Path to .env file")
UrlOption = typer.Option(None, "--url", "-u", help="SQLAlchemy database URL")
SchemaOption = typer.Option(None, "--schema", "-s", help="Schema to read")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


def _load(env_file: Optional[Path], verbose: bool) -> Settings:
    """Load settings and configure logging for a command."""
    if env_file:
        settings = load_settings(env_file)
    else:
        settings = get_settings()

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        log_sql=settings.log_sql,
    )
    return settings


def _engine(settings: Settings, url: Optional[str]) -> Engine:
    database_url = url or settings.database_url
    if not database_url:
        console.print("[red]Error: No database URL configured![/red]")
        console.print("Pass --url or set DBMETA_DATABASE_URL in your .env file.")
        raise typer.Exit(1)

    try:
        return create_engine(database_url)
    except ArgumentError as e:
        console.print(f"[red]Error: Invalid database URL: {e}[/red]")
        raise typer.Exit(1)


def _fail(error: DbMetaError, verbose: bool) -> NoReturn:
    console.print(f"[red]Error: {error.message}[/red]")
    if verbose:
        console.print(error.to_dict())
    raise typer.Exit(1)


@app.command()
def tables(
    pattern: Optional[str] = typer.Argument(None, help="Table name pattern (% and _ wildcards)"),
    url: Optional[str] = UrlOption,
    schema: Optional[str] = SchemaOption,
    table_type: list[TableType] = typer.Option(
        [TableType.TABLE], "--type", "-t", help="Table types to list (repeatable)"
    ),
    env_file: Optional[Path] = EnvOption,
    verbose: bool = VerboseOption,
):
    """
    List tables of a schema.
    """
    settings = _load(env_file, verbose)
    engine = _engine(settings, url)

    try:
        metas = SchemaIntrospector(engine).get_simple_table_meta(
            schema=schema or settings.default_schema,
            table_name_pattern=pattern,
            types=table_type,
        )
    except DbMetaError as e:
        _fail(e, verbose)
    finally:
        engine.dispose()

    table = Table(title=f"Tables ({len(metas)})")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Comment", style="yellow")

    for meta in metas:
        table.add_row(meta.table_name, meta.table_type, meta.table_comment or "")

    console.print(table)


@app.command()
def describe(
    table_name: str = typer.Argument(..., help="Table name"),
    url: Optional[str] = UrlOption,
    schema: Optional[str] = SchemaOption,
    env_file: Optional[Path] = EnvOption,
    verbose: bool = VerboseOption,
):
    """
    Show columns and indexes of one table.
    """
    settings = _load(env_file, verbose)
    engine = _engine(settings, url)

    try:
        metas = SchemaIntrospector(engine).get_table_meta(
            schema=schema or settings.default_schema,
            table_name_pattern=table_name,
            types=[TableType.TABLE, TableType.VIEW],
        )
    except DbMetaError as e:
        _fail(e, verbose)
    finally:
        engine.dispose()

    meta = next((m for m in metas if m.table_name == table_name), None)
    if meta is None:
        console.print(f"[red]Error: Table {table_name} not found[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold blue]{meta.table_name}[/bold blue] ({meta.table_type})")
    if meta.table_comment:
        console.print(f"  {meta.table_comment}")

    columns = Table(title="Columns")
    columns.add_column("#", justify="right")
    columns.add_column("Name", style="cyan")
    columns.add_column("Type", style="green")
    columns.add_column("Length", justify="right")
    columns.add_column("Scale", justify="right")
    columns.add_column("Null")
    columns.add_column("PK")
    columns.add_column("Default", style="yellow")
    columns.add_column("Comment")

    for column in meta.ordered_columns():
        columns.add_row(
            str(column.ordinal_position),
            column.column_name,
            column.jdbc_type_name,
            str(column.column_length),
            str(column.scale),
            "YES" if column.nullable else "NO",
            "PK" if column.primary_key else "",
            column.column_default or "",
            column.column_comment,
        )
    console.print(columns)

    if meta.index_info_list:
        indexes = Table(title="Indexes")
        indexes.add_column("Name", style="cyan")
        indexes.add_column("Columns", style="green")
        indexes.add_column("Unique")
        for index in meta.index_info_list:
            indexes.add_row(index.index_name, index.column_name, "NO" if index.non_unique else "YES")
        console.print(indexes)


@app.command()
def ddl(
    pattern: Optional[str] = typer.Argument(None, help="Table name pattern (% and _ wildcards)"),
    url: Optional[str] = UrlOption,
    schema: Optional[str] = SchemaOption,
    target: Optional[str] = typer.Option(None, "--target", "-T", help="Target dialect (mysql, dm)"),
    target_schema: Optional[str] = typer.Option(
        None, "--target-schema", help="Schema to qualify generated tables with"
    ),
    env_file: Optional[Path] = EnvOption,
    verbose: bool = VerboseOption,
):
    """
    Generate CREATE TABLE statements for the target dialect.
    """
    settings = _load(env_file, verbose)
    engine = _engine(settings, url)

    try:
        generator = DialectRegistry.resolve(target or settings.target_dialect)
        metas = SchemaIntrospector(engine).get_table_meta(
            schema=schema or settings.default_schema,
            table_name_pattern=pattern,
        )
        statements = [generator.generate_table_ddl(meta, schema=target_schema) for meta in metas]
    except DbMetaError as e:
        _fail(e, verbose)
    finally:
        engine.dispose()

    for statement in statements:
        if statement:
            typer.echo(statement)


@app.command("show-ddl")
def show_ddl(
    table_name: str = typer.Argument(..., help="Table or view name"),
    url: Optional[str] = UrlOption,
    schema: Optional[str] = SchemaOption,
    view: bool = typer.Option(False, "--view", help="Fetch view DDL instead of table DDL"),
    env_file: Optional[Path] = EnvOption,
    verbose: bool = VerboseOption,
):
    """
    Show the DDL stored by the server for a table or view.
    """
    settings = _load(env_file, verbose)
    engine = _engine(settings, url)

    if settings.database_type:
        source_type = DatabaseType.from_name(settings.database_type)
    else:
        source_type = DatabaseType.from_url(engine.url.drivername)

    try:
        generator = DialectRegistry.resolve(source_type)
        with engine.connect() as connection:
            if view:
                text = generator.fetch_view_ddl(connection, schema or settings.default_schema, table_name)
            else:
                text = generator.fetch_table_ddl(connection, schema or settings.default_schema, table_name)
    except DbMetaError as e:
        _fail(e, verbose)
    finally:
        engine.dispose()

    if text is None:
        console.print(f"[yellow]No DDL returned for {table_name}[/yellow]")
        raise typer.Exit(1)
    typer.echo(text)


@app.command()
def dialects():
    """
    List dialects DDL can be generated for.
    """
    for db_type in DialectRegistry.get_supported_types():
        console.print(f"  - [green]{db_type}[/green]")


@app.command()
def config(
    env_file: Optional[Path] = EnvOption,
):
    """
    Show current configuration.
    """
    if env_file:
        settings = load_settings(env_file)
    else:
        settings = get_settings()

    console.print("\n[bold blue]dbmeta Configuration[/bold blue]")
    console.print("-" * 40)

    console.print("\n[cyan]Source:[/cyan]")
    if settings.database_url:
        console.print(f"  URL: {make_url(settings.database_url).render_as_string(hide_password=True)}")
    else:
        console.print("  URL: [yellow]not configured[/yellow]")
    console.print(f"  Type: {settings.get_database_type().value}")
    console.print(f"  Default schema: {settings.default_schema or '-'}")

    console.print("\n[cyan]DDL:[/cyan]")
    console.print(f"  Target dialect: {settings.target_dialect}")

    console.print("\n[cyan]Logging:[/cyan]")
    console.print(f"  Level: {settings.log_level}")
    console.print(f"  File: {settings.log_file or '-'}")
    console.print(f"  SQL: {settings.log_sql}")


@app.command()
def version():
    """
    Show version information.
    """
    from dbmeta import __version__

    console.print(f"dbmeta version: [green]{__version__}[/green]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
