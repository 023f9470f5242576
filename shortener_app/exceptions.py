class StoreError(Exception):
    """The mapping store could not be opened, read or appended to."""
