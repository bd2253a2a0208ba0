"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable:
- 0: Success
- 1: User error (configuration failed validation)
- 3: Release error (the hook reported failure, including unknown hooks)
- 5: I/O error (config or context file unreadable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    RELEASE_ERROR = 3
    IO_ERROR = 5
