import click
import json
from pathlib import Path

from versiondocs.config import load_config, save_config, get_config_path, get_default_config
from versiondocs.exit_codes import CommandError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("init")
@click.option("--repo", "repo_path", default=".", type=click.Path(file_okay=False),
              help="Repository to write the config file into")
@click.option("--format", "fmt", type=click.Choice(["json", "toml", "yaml"]), default="json",
              help="Config file format")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_config(repo_path, fmt, force):
    """Write a config file with all defaults to the repository root."""
    suffix = "yml" if fmt == "yaml" else fmt
    config_path = Path(repo_path).resolve() / f".versiondocs.{suffix}"
    if config_path.exists() and not force:
        click.echo(f"Configuration already exists at {config_path} (use --force to overwrite)", err=True)
        raise click.Abort()

    save_config(get_default_config(), config_path)
    click.echo(f"Configuration written to {config_path}")


@config_cmd.command("show")
@click.option("--repo", "repo_path", default=".", type=click.Path(file_okay=False),
              help="Repository whose configuration to show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(repo_path, pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        config_path = get_config_path(repo_path)
        print(json.dumps({"config_path": str(config_path), "exists": config_path.exists()}))
        return

    try:
        config = load_config(repo_path)
    except CommandError as e:
        click.echo(f"Error [{e.stage}]: {e}", err=True)
        raise SystemExit(e.exit_code)

    if pretty:
        # Pretty print for human readability
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        # Default: single-line JSON (JSONL)
        print(json.dumps(config, ensure_ascii=False))
