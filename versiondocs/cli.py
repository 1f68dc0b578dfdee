#!/usr/bin/env python3

import click

from versiondocs.commands.publish import publish_cmd
from versiondocs.commands.versions import versions_cmd
from versiondocs.commands.config import config_cmd


@click.group()
@click.version_option(package_name="versiondocs")
def cli():
    """versiondocs - Publish versioned documentation from git tags.

    Builds the docs of every release tag plus the development branch
    into one static site: a subdirectory per version and an index page
    linking them, committed to a publish branch such as gh-pages.
    """
    pass


cli.add_command(publish_cmd)
cli.add_command(versions_cmd)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
