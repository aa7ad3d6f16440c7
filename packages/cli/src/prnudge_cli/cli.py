"""CLI entry point for prnudge.

Commands:
  remind   — post reminder comments on pull requests with overdue reviews
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prnudge_cli.commands.remind import remind_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prnudge"),
    prog_name="prnudge",
)
@click.option(
    "--config",
    "config_path",
    default=".prnudge.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRNUDGE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every pull request decision.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Remind reviewers about pull requests waiting too long for review."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(remind_cmd)
