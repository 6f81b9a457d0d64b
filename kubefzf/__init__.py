"""
kubefzf keeps an on-disk snapshot of cluster resources for fuzzy completion.
"""

__all__ = [
    "codec",
    "config",
    "exceptions",
    "resources",
    "store",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
