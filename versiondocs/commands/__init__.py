"""Click commands for the versiondocs CLI."""
