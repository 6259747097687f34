"""CLI entry point for bzverify.

Commands:
  verify  — verify bugs fixed in a release tag and move approved ones to VERIFIED
  links   — show the GitHub PRs linked from each bug
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from bzverify_cli.commands.links import links_cmd
from bzverify_cli.commands.verify import verify_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # PyGithub and urllib3 are chatty at DEBUG.
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("bzverify"),
    prog_name="bzverify",
)
@click.option(
    "--config",
    "config_path",
    default=".bzverify.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="BZVERIFY_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Verify Bugzilla bugs against QA approval of their GitHub PRs."""
    from bzverify_core.config import load_config
    from bzverify_cli.auth import resolve_bugzilla_api_key, resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    token = resolve_github_token()
    if token:
        config["github_token"] = token
    api_key = resolve_bugzilla_api_key()
    if api_key:
        config["bugzilla_api_key"] = api_key

    ctx.obj["config"] = config


main.add_command(verify_cmd)
main.add_command(links_cmd)
