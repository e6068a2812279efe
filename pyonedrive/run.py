import logging
from pathlib import Path

import typer

from pyonedrive import AsyncJob, ItemReference, OneDrive, OneDriveError, load_config

app = typer.Typer(help="Work with OneDrive from the command line.")


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, help="Path to the config file"),
    debug: bool = typer.Option(False, help="Ask the service for pretty JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests"),
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    ctx.ensure_object(dict)
    try:
        client_config = load_config(config)
    except OneDriveError as e:
        _fail(e)
    if debug:
        client_config.debug = True
    od = OneDrive.from_client_config(client_config)
    ctx.call_on_close(od.close)
    ctx.obj["od"] = od


def _fail(error: object):
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _od(ctx: typer.Context) -> OneDrive:
    return ctx.obj["od"]


@app.command()
def drive(ctx: typer.Context, drive_id: str = typer.Argument("")):
    """Show a drive (the default drive when no ID is given)."""
    try:
        d = _od(ctx).drives.get(drive_id)
    except OneDriveError as e:
        _fail(e)
    typer.echo(f"{d.id}\t{d.drive_type}")
    if d.quota is not None:
        q = d.quota
        state = q.state.value if q.state else "unknown"
        typer.echo(f"used {q.used} of {q.total} bytes ({state})")


@app.command()
def drives(ctx: typer.Context):
    """List all drives."""
    try:
        collection = _od(ctx).drives.list_all()
    except OneDriveError as e:
        _fail(e)
    for d in collection.value:
        typer.echo(f"{d.id}\t{d.drive_type}")


@app.command()
def ls(ctx: typer.Context, item_id: str = typer.Argument("root")):
    """List the children of a folder."""
    try:
        collection = _od(ctx).items.list_children(item_id)
    except OneDriveError as e:
        _fail(e)
    for item in collection.value:
        marker = "d" if item.is_folder else "-"
        typer.echo(f"{marker} {item.size or 0:>12} {item.name}\t{item.id}")


@app.command()
def mkdir(ctx: typer.Context, parent_id: str, name: str):
    """Create a folder."""
    try:
        folder = _od(ctx).items.create_folder(parent_id, name)
    except OneDriveError as e:
        _fail(e)
    typer.echo(folder.id)


@app.command()
def rm(
    ctx: typer.Context,
    item_id: str,
    etag: str = typer.Option("", help="eTag to match"),
):
    """Delete an item."""
    try:
        deleted = _od(ctx).items.delete(item_id, etag)
    except OneDriveError as e:
        _fail(e)
    if not deleted:
        _fail(f"Deletion of {item_id} was not confirmed")


@app.command()
def mv(
    ctx: typer.Context,
    item_id: str,
    parent_id: str,
    name: str | None = typer.Option(None, help="New name"),
):
    """Move an item to another folder."""
    try:
        item = _od(ctx).items.move(item_id, ItemReference(id=parent_id), name)
    except OneDriveError as e:
        _fail(e)
    typer.echo(f"{item.name}\t{item.id}")


@app.command()
def cp(
    ctx: typer.Context,
    item_id: str,
    parent_id: str,
    name: str | None = typer.Option(None, help="Name of the copy"),
):
    """Start copying an item; prints the job location."""
    try:
        job = _od(ctx).items.copy(item_id, ItemReference(id=parent_id), name)
    except OneDriveError as e:
        _fail(e)
    typer.echo(job.location)


@app.command()
def upload(
    ctx: typer.Context,
    folder_id: str,
    file: Path,
    name: str | None = typer.Option(None, help="Remote file name"),
):
    """Upload a file smaller than 100MB."""
    try:
        item = _od(ctx).items.simple_upload(folder_id, file, name)
    except (OneDriveError, FileNotFoundError) as e:
        _fail(e)
    typer.echo(f"{item.name}\t{item.id}")


@app.command()
def status(ctx: typer.Context, location: str):
    """Check the progress of a copy or upload job."""
    try:
        job_status = AsyncJob(_od(ctx), location).check_status()
    except OneDriveError as e:
        _fail(e)
    typer.echo(
        f"{job_status.operation}\t{job_status.status}\t"
        f"{job_status.percentage_complete:.0f}%"
    )


if __name__ == "__main__":
    app()
