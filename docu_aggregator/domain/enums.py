"""Domain enums for the docu aggregator."""
from enum import Enum


class BuildImportStatus(Enum):
    """Import state of one build as reported to the build summaries."""
    UNPROCESSED = "UNPROCESSED"
    QUEUED_FOR_PROCESSING = "QUEUED_FOR_PROCESSING"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    OUTDATED = "OUTDATED"

    def is_failed(self) -> bool:
        return self is BuildImportStatus.FAILED


class StatusEnum(Enum):
    """Execution status of use cases, scenarios and steps."""
    SUCCESS = "success"
    FAILED = "failed"
