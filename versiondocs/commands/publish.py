"""
Publish command for versiondocs.

Builds every documentation version of a repository into the publish
branch and commits the result.
"""

import click
import json
import sys
from pathlib import Path

from versiondocs.config import load_config, configure_logging
from versiondocs.exit_codes import (
    CommandError,
    SUCCESS,
    PARTIAL_SUCCESS,
    NOTHING_TO_PUBLISH,
    INTERRUPTED,
)
from versiondocs.render import render_publish_summary
from versiondocs.services.publish_service import PublishService, PublishOptions


def _drain(progress):
    """Run a service generator to completion, returning its return value."""
    while True:
        try:
            message = next(progress)
        except StopIteration as stop:
            return stop.value
        click.echo(message, err=True)


@click.command("publish")
@click.option("--repo", "repo_path", default=".", type=click.Path(file_okay=False),
              help="Repository to publish from (default: current directory)")
@click.option("--branch", default=None, help="Publish branch (default from config: gh-pages)")
@click.option("--project", default=None, help="Project name used in titles and the index")
@click.option("--message", "-m", default=None, help="First line of the commit message")
@click.option("--dry-run", is_flag=True, help="Show which versions would be built")
@click.option("--no-commit", is_flag=True, help="Leave the output worktree for a manual commit")
@click.option("--keep-worktrees", is_flag=True, help="Do not remove worktrees after the run")
@click.option("--empty-ok", is_flag=True, help="Exit 0 when there is nothing new to publish")
@click.option("--json", "json_output", is_flag=True, help="Output as JSONL")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def publish_cmd(repo_path, branch, project, message, dry_run, no_commit, keep_worktrees,
                empty_ok, json_output, verbose):
    """Publish documentation for every tagged version.

    Checks out each version tag in an isolated worktree, builds its
    documentation and merges the rendered site into the publish branch,
    one subdirectory per version, with an index page linking them.

    Examples:

    \b
        versiondocs publish
        versiondocs publish --dry-run
        versiondocs publish --repo ~/src/jj --branch gh-pages --empty-ok
    """
    repo_path = str(Path(repo_path).resolve())
    service = None

    try:
        config = load_config(repo_path)
        configure_logging(config, verbose=verbose)
        service = PublishService(config=config)
        options = PublishOptions(
            branch=branch,
            project=project,
            message=message,
            dry_run=dry_run,
            no_commit=no_commit,
            keep_worktrees=keep_worktrees,
        )
        summary = _drain(service.run(repo_path, options))
    except CommandError as e:
        click.echo(f"Error [{e.stage}]: {e}", err=True)
        if json_output and service is not None and service.last_result is not None:
            print(json.dumps(service.last_result.to_dict()), flush=True)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(INTERRUPTED)

    if json_output:
        for result in summary.results:
            print(json.dumps(result.to_dict()), flush=True)
        print(json.dumps(summary.to_dict()), flush=True)
    else:
        render_publish_summary(summary)

    if summary.failed:
        click.echo(f"{summary.failed} version(s) failed to build", err=True)
        sys.exit(PARTIAL_SUCCESS)
    if summary.empty_commit and not empty_ok:
        sys.exit(NOTHING_TO_PUBLISH)
    sys.exit(SUCCESS)
