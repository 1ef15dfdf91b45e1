from .logging_utils import setup_logging
from .normalization import int_to_keyword, is_valid_url, normalize_url, sanitize_keyword

__all__ = [
    "setup_logging",
    "normalize_url",
    "is_valid_url",
    "sanitize_keyword",
    "int_to_keyword",
]
__version__ = "0.1.0"
