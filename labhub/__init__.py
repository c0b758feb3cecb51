"""LabHub laboratory resource booking service."""
