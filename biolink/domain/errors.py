"""Storage-level error types shared by adapters and components."""


class StorageError(Exception):
    """Base class for storage errors."""


class DuplicateKeyError(StorageError):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, table: str, field: str) -> None:
        self.table = table
        self.field = field
        super().__init__(f"Duplicate value for {table}.{field}")


class OrderMismatchError(Exception):
    """Raised when a reorder id list is not exactly a profile's current link set."""

    def __init__(self, missing: set[int], unexpected: set[int]) -> None:
        self.missing = missing
        self.unexpected = unexpected
        super().__init__(
            f"Reorder ids do not match current links "
            f"(missing={sorted(missing)}, unexpected={sorted(unexpected)})"
        )
