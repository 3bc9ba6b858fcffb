"""Process exit codes.

CI jobs branch on these, so the numbers are part of the interface and never
change meaning.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1  # bad arguments, unparseable version
    ENV_ERROR = 2  # not a git repository, gh missing or logged out
    VALIDATION_ERROR = 3  # duplicate version, version regression
    GIT_ERROR = 4  # creating, moving or pushing a tag failed
    HOST_ERROR = 5  # the draft release could not be created
    PARTIAL = 6  # tags applied, release left as draft
