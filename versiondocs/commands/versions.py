"""
List the versions a publish run would build.
"""

import click
import json
import sys
from pathlib import Path

from versiondocs.config import load_config, configure_logging
from versiondocs.exit_codes import CommandError
from versiondocs.render import render_versions_table
from versiondocs.services.publish_service import PublishService


@click.command("versions")
@click.option("--repo", "repo_path", default=".", type=click.Path(file_okay=False),
              help="Repository to inspect (default: current directory)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSONL")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def versions_cmd(repo_path, json_output, verbose):
    """Show resolved documentation versions in publish order.

    The prerelease (head) version is always first, followed by tagged
    releases from newest to oldest.
    """
    repo_path = str(Path(repo_path).resolve())

    try:
        config = load_config(repo_path)
        configure_logging(config, verbose=verbose)
        versions = PublishService(config=config).resolve_versions(repo_path)
    except CommandError as e:
        click.echo(f"Error [{e.stage}]: {e}", err=True)
        sys.exit(e.exit_code)

    if json_output:
        for version in versions:
            print(json.dumps(version.to_dict()), flush=True)
    else:
        render_versions_table(versions)
