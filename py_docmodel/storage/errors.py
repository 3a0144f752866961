class StoreError(OSError):
    """Failure inside the embedded document store."""
