"""Submission mode."""

from enum import StrEnum


class SubmissionMode(StrEnum):
    """NORMAL persists the original and its transform; TEST only validates."""

    NORMAL = "normal"
    TEST = "test"

    @classmethod
    def parse(cls, value: "str | SubmissionMode | None") -> "SubmissionMode":
        """Missing mode means NORMAL; any unrecognized value is treated as TEST."""
        if value is None:
            return cls.NORMAL
        if str(value).strip().lower() == cls.NORMAL.value:
            return cls.NORMAL
        return cls.TEST
