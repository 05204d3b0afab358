"""CLI application for modwatch."""

import asyncio

import typer
from rich.console import Console

from core.errors import ModwatchError, UsageError
from core.parse_gomod import read_manifest
from core.report import (
    ModuleStream,
    format_identity,
    format_json_output,
    format_update_line,
    iter_updates,
)
from core.resolve_go import GoResolver
from core.retrieve import (
    DEFAULT_API_URL,
    RETRIEVAL_STRATEGIES,
    ManifestRetriever,
    get_retriever,
    working_directory,
)

err_console = Console(stderr=True, markup=False, highlight=False, emoji=False, soft_wrap=True)

USAGE = "Usage: modwatch -repo=<git-url>"


async def check_repository(
    location: str,
    retriever: ManifestRetriever,
    resolver: GoResolver,
    format_type: str = "text",
    verbose: bool = False,
) -> None:
    """Fetch the manifest, run the resolver and print available updates."""
    with working_directory() as workdir:
        if verbose:
            err_console.print(f"Working directory: {workdir}", style="dim")

        retrieval = await retriever.fetch(location, workdir)
        for warning in retrieval.warnings:
            err_console.print(f"Warning: {warning}", style="yellow")
        if verbose and retrieval.lock_path is not None:
            err_console.print(f"Using lock file: {retrieval.lock_path.name}", style="dim")

        info = read_manifest(retrieval.manifest_path)
        if format_type == "text":
            typer.echo(format_identity(info))

        if verbose:
            err_console.print(f"Running: {' '.join(resolver.command)}", style="dim")
        output = await resolver.list_modules(workdir)

        stream = ModuleStream(output)
        if format_type == "json":
            typer.echo(format_json_output(info, iter_updates(stream)))
        else:
            for record in iter_updates(stream):
                typer.echo(format_update_line(record))

        if verbose and stream.trailing.strip():
            err_console.print(
                f"Ignored {len(stream.trailing.strip())} characters of undecodable go list output",
                style="dim",
            )


app = typer.Typer(
    name="modwatch",
    help="modwatch - Report outdated dependencies of a remote Go module",
    add_completion=False,
)


@app.command()
def check(
    repo: str | None = typer.Option(None, "-repo", "--repo", help="Git repository URL to analyze"),
    strategy: str = typer.Option(
        "api", "--strategy", envvar="MODWATCH_STRATEGY",
        help="How to fetch go.mod: api (GitHub contents API) or clone (git clone)",
    ),
    token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub API token"),
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", envvar="GITHUB_API_URL", help="GitHub API root"),
    go_binary: str = typer.Option("go", "--go", envvar="MODWATCH_GO", help="Go executable"),
    git_binary: str = typer.Option("git", "--git", help="Git executable for the clone strategy"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print diagnostics to stderr"),
) -> None:
    """modwatch - List go.mod dependencies with newer versions available."""

    try:
        if not repo:
            raise UsageError(USAGE)
        if format_type not in ("text", "json"):
            raise UsageError(f"Unsupported format: {format_type}")
        if strategy not in RETRIEVAL_STRATEGIES:
            raise UsageError(f"Unknown retrieval strategy: {strategy}")

        retriever = get_retriever(strategy, token=token, api_url=api_url, git=git_binary)
        resolver = GoResolver(go_binary=go_binary)
        asyncio.run(check_repository(repo, retriever, resolver, format_type, verbose))

    except typer.Exit:
        raise
    except UsageError as e:
        typer.echo(str(e))
        raise typer.Exit(e.exit_code)
    except ModwatchError as e:
        err_console.print(f"Error: {e}", style="red")
        raise typer.Exit(e.exit_code)
    except Exception as e:
        err_console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
