"""adsbatch CLI - Main commands."""
import asyncio
import json
import logging
from pathlib import Path
from typing import List

import aiofiles
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="adsbatch",
    help="Upload batch job operations and download their results",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


async def load_operations(path: Path) -> List:
    """Read a JSON list of operations."""
    from adsbatch import Operation

    async with aiofiles.open(path, 'r', encoding='utf-8') as f:
        data = json.loads(await f.read())
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of operations")
    return [Operation.from_dict(item) for item in data]


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Batch job helpers."""
    from adsbatch import setup_logging

    logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def upload(
    url: str = typer.Argument(..., help="Upload URL of the batch job"),
    operations_file: Path = typer.Argument(..., help="JSON file with operations", exists=True),
    resume: bool = typer.Option(False, "--resume", help="Resume a previously interrupted upload"),
    chunk_size: int = typer.Option(None, "--chunk-size", "-c", help="Upload in chunks of this many bytes (multiple of 262144)"),
    resumable: bool = typer.Option(False, "--resumable", "-r", help="Open a resumable session for URL first"),
):
    """Upload operations to a batch job."""
    from adsbatch import AdsUser, BatchJobUtilities

    async def do_upload():
        operations = await load_operations(operations_file)

        async with AdsUser() as user:
            if chunk_size is None:
                utilities = BatchJobUtilities(user)
            else:
                utilities = BatchJobUtilities(user, use_chunking=True, chunk_size=chunk_size)

            async with utilities:
                target = url
                if resumable:
                    target = await utilities.get_resumable_upload_url(url)
                    console.print(f"[cyan]Session URI:[/cyan] {target}")

                with console.status(f"Uploading {len(operations)} operations..."):
                    await utilities.upload(target, operations, resume_previous_upload=resume)

        console.print(f"[green]Uploaded {len(operations)} operations[/green]")

    try:
        run_async(do_upload())
    except Exception as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def download(
    url: str = typer.Argument(..., help="Download URL of a finished batch job"),
    output: Path = typer.Option(None, "--output", "-o", help="Also save the raw XML here"),
):
    """Download and show batch job results."""
    from adsbatch import AdsUser, BatchJobUtilities

    async def do_download():
        async with AdsUser() as user:
            async with BatchJobUtilities(user) as utilities:
                if output:
                    # Keep the raw document, then parse it locally
                    contents = await utilities.download_text(url)
                    async with aiofiles.open(output, 'w', encoding='utf-8') as f:
                        await f.write(contents)
                    return utilities.parse_response(contents)
                return await utilities.download(url)

    try:
        response = run_async(do_download())
    except Exception as e:
        console.print(f"[red]Download failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table()
    table.add_column("Index", justify="right")
    table.add_column("Status")
    table.add_column("Details")

    for result in response:
        if result.is_success:
            table.add_row(str(result.index), "[green]OK[/green]", ", ".join(result.result or {}))
        else:
            details = "; ".join(e.error_string or e.reason or "" for e in result.errors)
            table.add_row(str(result.index), "[red]FAILED[/red]", details)

    console.print(table)
    console.print(f"{len(response.succeeded)} succeeded, {len(response.failed)} failed")
    if output:
        console.print(f"Raw results saved to: {output}")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
