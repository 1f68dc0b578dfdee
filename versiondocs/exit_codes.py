"""
Standard exit codes for versiondocs commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
REPOSITORY_UNAVAILABLE = 64  # Tags could not be listed / not a git repository
WORKTREE_ERROR = 65      # Worktree could not be created or switched
CONFIG_ERROR = 66        # Configuration file error
MISSING_TOOL = 67        # git or the site builder is not on PATH
PARTIAL_SUCCESS = 71     # Some versions built, some failed
NOTHING_TO_PUBLISH = 72  # Output tree unchanged since the last publish
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.

    ``stage`` names the pipeline step that failed so diagnostics can
    point at it.
    """
    stage = "run"

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR, stage: Optional[str] = None):
        super().__init__(message)
        self.exit_code = exit_code
        if stage:
            self.stage = stage


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    stage = "config"

    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
