"""links command — show the GitHub PRs linked from bugs."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from bzverify_cli.clients import build_tracker
from bzverify_cli.commands.verify import collect_bug_ids
from bzverify_core.links import resolve_links

console = Console()


@click.command("links")
@click.option("--bugs-file", type=click.File("r"), default=None, help="File with one bug ID per line.")
@click.argument("bug_ids", nargs=-1, type=int)
@click.pass_context
def links_cmd(ctx, bugs_file, bug_ids: tuple[int, ...]):
    """Show the GitHub PRs linked from each bug.

    Bugs without a GitHub PR link are not listed.
    """
    config = ctx.obj["config"]

    ids = collect_bug_ids(bug_ids, bugs_file)
    if not ids:
        raise click.UsageError("No bug IDs given. Pass them as arguments or with --bugs-file.")
    if not config.get("bugzilla_api_key"):
        raise click.UsageError("BUGZILLA_API_KEY environment variable is not set.")

    bug_prs, errors = resolve_links(ids, build_tracker(config), config.get("github_url", "https://github.com/"))

    if bug_prs:
        table = Table(title="Linked pull requests", show_header=True, header_style="bold cyan")
        table.add_column("Bug", style="bold", width=10)
        table.add_column("Pull requests")
        for bug_id, prs in bug_prs.items():
            table.add_row(str(bug_id), ", ".join(str(pr) for pr in prs))
        console.print(table)
    else:
        console.print("[yellow]No linked pull requests found.[/yellow]")

    for err in errors:
        console.print(err, style="red", markup=False)
    if errors:
        ctx.exit(1)
