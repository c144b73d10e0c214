"""Document actions checked by the permission checker."""

from enum import StrEnum


class DocumentAction(StrEnum):
    """Actions that can be performed on billing documents."""

    SUBMIT = "submit"
    READ = "read"
    CHANGE_STATUS = "change_status"
    ERASE = "erase"
    PROCESS_FLAG = "process_flag"
