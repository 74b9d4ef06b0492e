"""Input normalization."""

from .config_resolver import DEFAULT_GLOBAL_CONFIG, resolve_effective_config
from .request import normalize_request

__all__ = ["DEFAULT_GLOBAL_CONFIG", "normalize_request", "resolve_effective_config"]
