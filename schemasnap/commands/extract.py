"""Extraction commands - list objects, print canonical scripts, dump snapshots."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable
from rich.text import Text

from ..config import settings
from ..database import MySQLIntrospector, ObjectKind
from ..errors import SchemaSnapError
from ..logging import log_run

app = typer.Typer(help="Extract canonical schema objects from a MySQL database")
console = Console()


def _open(host, port, user, password, database) -> MySQLIntrospector:
    return MySQLIntrospector.from_settings(
        settings,
        host=host,
        port=port,
        user=user,
        password=password,
        database=database,
    )


def _fail(error: SchemaSnapError):
    console.print(f"[red]Error ({error.code}): {escape(error.message)}[/red]")
    raise typer.Exit(1)


def _safe_filename(name: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in name)


def write_snapshot_files(snapshot, output_dir: Path) -> int:
    """Write one <kind>/<name>.sql file per script. Returns the file count."""
    count = 0
    for kind, scripts in snapshot.scripts.items():
        kind_dir = output_dir / kind.value
        kind_dir.mkdir(parents=True, exist_ok=True)
        for name, script in scripts.items():
            (kind_dir / f"{_safe_filename(name)}.sql").write_text(script + "\n", encoding="utf-8")
            count += 1
    return count


@app.command("list")
def list_objects(
    kind: ObjectKind = typer.Argument(..., help="Object kind: table, view, function, procedure, trigger"),
    include: str = typer.Option("", "--include", "-i", help="Comma-separated names to keep"),
    exclude: str = typer.Option("", "--exclude", "-x", help="Comma-separated names to skip"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="MySQL host (or MYSQL_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database name (or MYSQL_DATABASE env)"),
):
    """List object names of one kind."""
    introspector = _open(host, port, user, password, database)
    try:
        with log_run(
            "list",
            host=introspector.host,
            database_name=introspector.database,
            kinds=[kind.value],
            include_filter=include,
            exclude_filter=exclude,
        ) as ctx:
            with introspector:
                names = introspector.get_object_list(kind, include, exclude)
            ctx.objects_count = len(names)
    except SchemaSnapError as e:
        _fail(e)

    for name in names:
        console.print(name, markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command("script")
def show_script(
    kind: ObjectKind = typer.Argument(..., help="Object kind"),
    name: str = typer.Argument(..., help="Object name"),
    comment: bool = typer.Option(False, "--comment", "-c", help="Also print the object's comment"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="MySQL host (or MYSQL_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database name (or MYSQL_DATABASE env)"),
):
    """Print the canonical creation script of one object."""
    introspector = _open(host, port, user, password, database)
    object_comment = ""
    try:
        with log_run(
            "script",
            host=introspector.host,
            database_name=introspector.database,
            kinds=[kind.value],
            arguments={"name": name},
        ) as ctx:
            with introspector:
                script = introspector.get_script(kind, name)
                if comment:
                    object_comment = introspector.get_comment(kind, name)
            ctx.objects_count = 1
    except SchemaSnapError as e:
        _fail(e)

    if comment:
        console.print(f"-- {object_comment}", markup=False, emoji=False, highlight=False, soft_wrap=True)
    console.print(script, markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command("dump")
def dump(
    kinds: Optional[List[ObjectKind]] = typer.Option(None, "--kind", "-k", help="Object kind to dump. Can be specified multiple times (default: all)."),
    include: str = typer.Option("", "--include", "-i", help="Comma-separated names to keep"),
    exclude: str = typer.Option("", "--exclude", "-x", help="Comma-separated names to skip"),
    output_dir: Optional[str] = typer.Option(None, "--output", "-o", help="Write scripts (or snapshot.json) to directory"),
    as_json: bool = typer.Option(False, "--json", help="Emit the snapshot as JSON"),
    comments: bool = typer.Option(False, "--comments", help="Include object comments"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="MySQL host (or MYSQL_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database name (or MYSQL_DATABASE env)"),
):
    """
    Snapshot the database into canonical scripts.

    Without --output, prints a per-kind summary (or the JSON document with --json).
    """
    introspector = _open(host, port, user, password, database)
    kind_values = [k.value for k in kinds] if kinds else [k.value for k in ObjectKind]
    try:
        with log_run(
            "dump",
            host=introspector.host,
            database_name=introspector.database,
            kinds=kind_values,
            include_filter=include,
            exclude_filter=exclude,
            arguments={"output": output_dir, "json": as_json, "comments": comments},
        ) as ctx:
            with introspector:
                snap = introspector.snapshot(include, exclude, kinds=kinds, with_comments=comments)
            ctx.tables_count = len(snap.tables)
            ctx.objects_count = snap.object_count()
    except SchemaSnapError as e:
        _fail(e)

    if as_json:
        document = json.dumps(snap.to_dict(), indent=2, ensure_ascii=False)
        if output_dir:
            out = Path(output_dir)
            out.mkdir(parents=True, exist_ok=True)
            (out / "snapshot.json").write_text(document + "\n", encoding="utf-8")
            console.print(f"[green]Wrote {out / 'snapshot.json'}[/green]")
        else:
            console.print(document, markup=False, emoji=False, highlight=False, soft_wrap=True)
        return

    if output_dir:
        count = write_snapshot_files(snap, Path(output_dir))
        console.print(f"[green]Wrote {count} script(s) to {output_dir}[/green]")
        return

    summary = RichTable(title=f"Snapshot of {snap.database or '(default database)'}")
    summary.add_column("Kind", style="cyan")
    summary.add_column("Objects", justify="right")
    for kind, scripts in snap.scripts.items():
        summary.add_row(kind.value, str(len(scripts)))
    console.print(summary)


def _format_value(value) -> Text:
    if value is None:
        return Text("NULL", style="dim")
    if isinstance(value, bytes):
        return Text("0x" + value.hex())
    return Text(str(value))


@app.command("data")
def show_data(
    table: str = typer.Argument(..., help="Table name"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="SQL condition to filter rows"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of rows"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="MySQL host (or MYSQL_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="MySQL port (or MYSQL_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user (or MYSQL_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="MySQL password (or MYSQL_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-D", help="Database name (or MYSQL_DATABASE env)"),
):
    """Print typed rows of a table."""
    introspector = _open(host, port, user, password, database)
    try:
        with log_run(
            "data",
            host=introspector.host,
            database_name=introspector.database,
            kinds=[ObjectKind.TABLE.value],
            arguments={"table": table, "where": where, "limit": limit},
        ) as ctx:
            with introspector:
                rows = introspector.get_table_data(table, where=where, limit=limit)
            ctx.rows_count = len(rows)
    except SchemaSnapError as e:
        _fail(e)

    result = RichTable(title=table)
    if rows:
        for name in rows[0].columns:
            result.add_column(name)
        for row in rows:
            result.add_row(*(_format_value(v) for v in row.values))
    console.print(result)
    console.print(f"[dim]{len(rows)} row(s)[/dim]")
