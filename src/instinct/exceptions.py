"""Instinct store exceptions."""


class InstinctError(Exception):
    """Base class for instinct store errors."""


class InstinctNotFoundError(InstinctError):
    """Raised when an operation targets an instinct ID that does not exist."""

    def __init__(self, instinct_id: str) -> None:
        self.instinct_id = instinct_id
        super().__init__(f"Instinct not found: {instinct_id}")


class DuplicateInstinctError(InstinctError):
    """Raised when adding an instinct whose name is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Instinct "{name}" already exists. Use a different name.')


class InvalidImportError(InstinctError):
    """Raised when an import file is not a valid JSON array of instincts."""


class CorruptStoreError(InstinctError):
    """Raised when the store file cannot be parsed and the policy is ``fail``."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt instinct store at {path}: {reason}")
