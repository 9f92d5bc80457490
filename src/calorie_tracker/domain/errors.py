"""Domain errors surfaced to API callers."""


class EntryValidationError(ValueError):
    """Raised when request input cannot be turned into a valid command."""


class EntryNotFoundError(LookupError):
    """Raised when an entry id does not exist at update or delete time."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"entry_id not found: {entry_id}")
        self.entry_id = entry_id
