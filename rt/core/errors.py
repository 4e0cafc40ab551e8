"""Exit codes for the release-train CLI.

Each command maps its outcome onto one of these codes so CI jobs can tell a
misconfigured release apart from a failing build.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    Values are part of the CLI contract and should remain stable:
    - 0: Success
    - 1: User error (unknown module, bad arguments, precondition not met)
    - 2: Environment error (missing configuration, workspace not found)
    - 3: Build error (build tool failed, inconsistent descriptor)
    - 5: I/O error (descriptor unreadable or malformed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
