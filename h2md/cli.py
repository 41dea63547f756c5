"""h2md CLI - Click command definition and main entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from h2md.content import extract_content
from h2md.convert import html_to_markdown
from h2md.fetch import FetchResult, fetch_static
from h2md.registry import ConverterConfigError
from h2md.utils import source_to_slug

console = Console(stderr=True)


@click.command()
@click.argument("source")
@click.option("-o", "--output", "output_path", type=click.Path(), default=None,
              help="Output file or directory. Omit for stdout.")
@click.option("--gfm", is_flag=True,
              help="Enable GitHub Flavored Markdown rules (tables, ~~del~~, task lists)")
@click.option("--selector", default=None, help="CSS selector for content targeting")
@click.option("--readable", is_flag=True,
              help="Keep only the main content (readability) before converting")
@click.option("--timeout", default=30, help="HTTP timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Verbose progress output")
def main(
    source: str,
    output_path: str | None,
    gfm: bool,
    selector: str | None,
    readable: bool,
    timeout: int,
    verbose: bool,
):
    """Convert an HTML file, URL, or stdin to markdown.

    SOURCE can be an http(s) URL, a local HTML file, or - for stdin.

    \b
    Examples:
        h2md page.html                          # markdown to stdout
        h2md page.html --gfm -o out/            # save out/page.md
        h2md https://example.com --readable     # main content only
        cat page.html | h2md -                  # read stdin
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    html, url = _read_source(source, timeout, verbose)

    html = extract_content(html, url=url, selector=selector, strip_boilerplate=readable)
    try:
        markdown = html_to_markdown(html, gfm=gfm)
    except ConverterConfigError as e:
        raise click.ClickException(f"Conversion failed: {e}") from e

    if output_path:
        out = Path(output_path)
        if out.is_dir() or output_path.endswith("/"):
            out = out / f"{source_to_slug(url or 'stdin')}.md"
        _save_markdown(markdown, out)
        console.print(f"[green]Saved:[/green] {out}")
    else:
        click.echo(markdown)


def _read_source(source: str, timeout: int, verbose: bool) -> tuple[str, str]:
    """Return (html, url-or-path) for SOURCE."""
    if source == "-":
        with click.open_file("-") as stdin:
            return stdin.read(), ""

    if source.startswith(("http://", "https://")):
        if verbose:
            console.print(Panel(f"[bold]h2md - HTML to Markdown[/bold]\n{source}", expand=False))
        with Progress(
            SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
            console=console, transient=True,
        ) as progress:
            if verbose:
                progress.add_task(description="Fetching...", total=None)
            result = asyncio.run(_fetch(source, timeout))
        if result.status >= 400:
            raise click.ClickException(f"HTTP {result.status} fetching {source}")
        return result.html, result.url

    path = Path(source)
    if not path.is_file():
        raise click.ClickException(
            f"Source must be a URL (http/https), an existing file, or -: {source}"
        )
    if verbose:
        console.print(f"[dim]Converting file: {path}[/dim]")
    return path.read_text(encoding="utf-8", errors="replace"), str(path)


async def _fetch(url: str, timeout: int) -> FetchResult:
    try:
        return await fetch_static(url, timeout=timeout)
    except httpx.ConnectError as e:
        if "CERTIFICATE_VERIFY_FAILED" in str(e):
            console.print(
                "[yellow]SSL verification failed, retrying without verification[/yellow]",
            )
            return await fetch_static(url, timeout=timeout, verify_ssl=False)
        raise click.ClickException(f"Could not connect to {url}: {e}") from e
    except httpx.HTTPError as e:
        raise click.ClickException(f"Fetching {url} failed: {e}") from e


def _save_markdown(content: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content + "\n", encoding="utf-8")


if __name__ == "__main__":
    main()
