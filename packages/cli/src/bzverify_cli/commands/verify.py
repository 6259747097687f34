"""verify command — verify bugs fixed in a release tag."""

from __future__ import annotations

from typing import IO, Iterable

import click
from rich.console import Console
from rich.table import Table

from bzverify_cli.clients import build_labels, build_tracker
from bzverify_core.models import Outcome, VerificationReport
from bzverify_core.verifier import VerificationPolicy, Verifier

console = Console()

_OUTCOME_STYLE = {
    Outcome.VERIFIED: "green",
    Outcome.NOT_VERIFIED: "yellow",
    Outcome.FAILED: "red",
    Outcome.SKIPPED: "dim",
}


def collect_bug_ids(args: Iterable[int], bugs_file: IO[str] | None = None) -> list[int]:
    """Merge bug IDs from arguments and an optional file, keeping first-seen order.

    The file holds one ID per line; blank lines and `#` comments are ignored.
    """
    ids = list(args)
    if bugs_file is not None:
        for lineno, line in enumerate(bugs_file, 1):
            value = line.split("#", 1)[0].strip()
            if not value:
                continue
            try:
                ids.append(int(value))
            except ValueError:
                raise click.UsageError(f"Invalid bug ID {value!r} on line {lineno} of {bugs_file.name}")
    return list(dict.fromkeys(ids))


def print_report(report: VerificationReport, tag: str, shadow: bool = False) -> None:
    if report.results:
        title = f"Verification — {tag}" + (" (shadow)" if shadow else "")
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Bug", style="bold", width=10)
        table.add_column("Outcome", width=14)
        table.add_column("Commented", width=10)
        table.add_column("Errors", justify="right", width=7)
        for r in report.results:
            style = _OUTCOME_STYLE.get(r.outcome, "white")
            table.add_row(
                str(r.bug_id),
                f"[{style}]{r.outcome.value}[/{style}]",
                "yes" if r.commented else "no",
                str(len(r.errors)),
            )
        console.print(table)
        counts = ", ".join(
            f"{len(report.by_outcome(outcome))} {outcome.value.lower().replace('_', ' ')}"
            for outcome in (Outcome.VERIFIED, Outcome.NOT_VERIFIED, Outcome.SKIPPED, Outcome.FAILED)
        )
        console.print(f"{len(report.results)} bug(s): {counts}")

    if shadow:
        for r in report.results:
            if r.message:
                console.print(f"\n[bold cyan]Bug {r.bug_id}[/bold cyan] — comment (not posted):")
                console.print(f"  {r.message}".replace("\n", "\n  "), markup=False)

    if report.errors:
        console.print(f"\n[red]{len(report.errors)} error(s):[/red]")
        for err in report.errors:
            console.print(f"  - {err}", markup=False)


@click.command("verify")
@click.option("--tag", required=True, help="Release tag the bugs were fixed in, e.g. 4.14.3.")
@click.option(
    "--bugs-file",
    type=click.File("r"),
    default=None,
    help="File with one bug ID per line.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: evaluate bugs and print comments without writing to Bugzilla.",
)
@click.argument("bug_ids", nargs=-1, type=int)
@click.pass_context
def verify_cmd(ctx, tag: str, bugs_file, shadow: bool, bug_ids: tuple[int, ...]):
    """Verify bugs fixed in release TAG.

    Each ON_QA bug whose linked GitHub PRs all carry the QA approval label is
    moved to VERIFIED. Every other applicable bug gets a private comment
    explaining why it needs manual verification.

    \b
    Required environment variables:
      BUGZILLA_API_KEY     Bugzilla API key
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
    """
    config = ctx.obj["config"]

    ids = collect_bug_ids(bug_ids, bugs_file)
    if not ids:
        raise click.UsageError("No bug IDs given. Pass them as arguments or with --bugs-file.")
    if not config.get("bugzilla_api_key"):
        raise click.UsageError("BUGZILLA_API_KEY environment variable is not set.")
    if not config.get("github_token"):
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    try:
        policy = VerificationPolicy.from_config(config)
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    verifier = Verifier(
        build_tracker(config),
        build_labels(config),
        policy=policy,
        shadow=shadow,
    )
    report = verifier.run(ids, tag)
    print_report(report, tag, shadow=shadow)

    if report.errors:
        ctx.exit(1)
