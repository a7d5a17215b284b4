"""Read-only integrity checks across sessions, reports, comments, versions and shares."""
from .validator import OrphanedRecords, ValidationResult, find_orphaned_records, validate_data, validation_summary

__all__ = [
    "OrphanedRecords",
    "ValidationResult",
    "find_orphaned_records",
    "validate_data",
    "validation_summary",
]
