from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class PayloadError(RuntimeError):
    """Raised when a post payload (or the file holding it) cannot be parsed."""


class UnknownProviderError(PayloadError):
    """Raised when an embed references a provider without a known URL prefix."""

    def __init__(self, provider: str, *, post_id: str | None = None) -> None:
        self.provider = provider
        self.post_id = post_id
        where = f" in post {post_id}" if post_id else ""
        super().__init__(f"Unknown embed provider {provider!r}{where}")


class StorageError(RuntimeError):
    """Raised when reading or writing state in SQLite fails."""
