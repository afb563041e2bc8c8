"""Shared failure code constants for import pipeline error handling."""

# Abort the whole import; no report is produced.
FATAL_FAILURES = [
    "archival_failed",
    "identifier_resolution_failed",
]

ARCHIVAL_FAILED = "archival_failed"
IDENTIFIER_RESOLUTION_FAILED = "identifier_resolution_failed"
