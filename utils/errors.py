"""Custom exception types for the Local Lore application."""

class LocalLoreError(Exception):
    """Base class for exceptions in Local Lore."""
    pass

class ValidationError(LocalLoreError):
    """Exception raised for invalid input to a service operation."""
    pass

class NotFoundError(LocalLoreError):
    """Exception raised when a requested resource is not found in the database."""

    def __init__(self, entity: str, entity_id=None, message: str = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} not found")

class ConflictError(LocalLoreError):
    """Exception raised when a write would violate a uniqueness or protection rule."""
    pass

class UnsupportedFormatError(ValidationError):
    """Exception raised when an export format is not supported."""
    pass
