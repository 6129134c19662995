from __future__ import annotations

from .config import config_sha256, load_config
from .config_schema import AppConfig, SaveSettings
from .errors import ConfigError, PayloadError, StorageError, UnknownProviderError
from .normalizer import PostNormalizer
from .payload import parse_post_payload
from .result import ExtractionResult, FileCandidate, LinkBundle

__all__ = [
    "AppConfig",
    "ConfigError",
    "ExtractionResult",
    "FileCandidate",
    "LinkBundle",
    "PayloadError",
    "PostNormalizer",
    "SaveSettings",
    "StorageError",
    "UnknownProviderError",
    "config_sha256",
    "load_config",
    "parse_post_payload",
]
