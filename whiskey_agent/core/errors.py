"""Error taxonomy for identity resolution and ingestion."""


class WhiskeyAgentError(Exception):
    """Base class for all whiskey agent errors."""


class InputRejected(WhiskeyAgentError):
    """Raised when an entry carries no usable identity (empty or blank name)."""

    def __init__(self, reason: str, name: str | None = None):
        self.reason = reason
        self.name = name
        super().__init__(reason)


class CatalogError(WhiskeyAgentError):
    """Base class for catalog store failures."""


class CatalogConflict(CatalogError):
    """Raised when an insert violates the canonical key uniqueness constraint.

    The resolver recovers from this by re-fetching the entity that won the race.
    """

    def __init__(self, canonical_key: str):
        self.canonical_key = canonical_key
        super().__init__(f"Whiskey with canonical key '{canonical_key}' already exists")


class CatalogUnavailable(CatalogError):
    """Raised when a catalog lookup or write fails for any other reason."""


class JudgeUnavailable(WhiskeyAgentError):
    """Raised when the dedup judge cannot be reached or returns an unusable answer."""
