"""Secondary windows opened by the ``openReports`` and ``openSettings`` operations."""
