class DoesNotExist(Exception):  # noqa: N818
    """Exception raised when a resource does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class AlreadyExists(Exception):  # noqa: N818
    """Exception raised when a resource already exists."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" already exists')


class OwnerNotFound(DoesNotExist):
    """Exception raised when the owner of a highlight or document is missing."""

    def __init__(self, owner_kind: str, owner_id: int | str):
        self.owner_kind = owner_kind
        super().__init__(owner_kind, owner_id)


class ValidationError(ValueError):
    """Exception raised when input fails validation before persistence."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidRange(ValidationError):
    """Exception raised when highlight offsets do not describe a valid range."""

    def __init__(self, start_offset: int, end_offset: int, message: str):
        self.start_offset = start_offset
        self.end_offset = end_offset
        super().__init__("offsets", f"[{start_offset}, {end_offset}) {message}")


class TagResolutionFailed(Exception):  # noqa: N818
    """Exception raised when tag names cannot be resolved to tags."""

    def __init__(self, names: list[str], error: Exception):
        self.names = names
        self.error = error
        super().__init__(f"Tag resolution failed: {error}")


class PersistenceFailed(Exception):  # noqa: N818
    """Exception raised when a highlight could not be written."""

    def __init__(self, error: Exception):
        self.error = error
        super().__init__(f"Persistence failed: {error}")


class MalformedAnnotation(Exception):  # noqa: N818
    """Exception raised when a stored highlight cannot be matched to a document."""

    def __init__(self, highlight_id: int | None, error: Exception):
        self.highlight_id = highlight_id
        self.error = error
        super().__init__(f"Malformed highlight {highlight_id}: {error}")
