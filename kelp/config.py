"""
kelp.config - Reader configuration loader

This module handles parsing and loading kelp.it settings files. It provides
the ReaderConfig class which holds the options that shape a read.

The kelp.it file is itself read with the kelp reader and holds a single
association list:
    ((keep-comments . t)
     (max-depth . 256))

``t`` is true; ``nil`` and ``()`` are false.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from kelp.reader import DEFAULT_MAX_DEPTH, read_str
from kelp.types import (
    Cons,
    EmptyList,
    Float,
    Integer,
    Nil,
    ReaderError,
    String,
    Symbol,
    Token,
)

CONFIG_FILENAME = "kelp.it"
KNOWN_KEYS = ("keep-comments", "max-depth")


def token_to_python(token: Token) -> Any:
    """
    Convert a configuration value to a Python native value.

    - Symbol t -> True, other symbols -> their name
    - Nil, EmptyList -> False
    - Integer, Float, String -> their value
    - Proper lists -> list of converted items
    """
    if isinstance(token, Symbol):
        return True if token.value == "t" else token.value
    if isinstance(token, (Nil, EmptyList)):
        return False
    if isinstance(token, (Integer, Float, String)):
        return token.value
    if isinstance(token, Cons) and token.is_proper_list():
        return [token_to_python(item) for item in token]
    raise ValueError(f"unsupported configuration value: {token!r}")


def find_config_root(start_path: Optional[str] = None) -> Optional[str]:
    """
    Find the directory holding kelp.it by walking up from ``start_path``.

    Args:
        start_path: File or directory to start from. If None, uses the current
                    working directory.

    Returns:
        Absolute path to the directory containing kelp.it, or None if not found.
    """
    if start_path is None:
        current = os.getcwd()
    elif os.path.isfile(start_path):
        current = os.path.dirname(os.path.abspath(start_path))
    else:
        current = os.path.abspath(start_path)

    while True:
        if os.path.isfile(os.path.join(current, CONFIG_FILENAME)):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


@dataclass
class ReaderConfig:
    """
    Options for a read.

    Fields:
        keep_comments: Return top-level comments instead of dropping them
        max_depth: Deepest list/quote nesting accepted before failing
        config_path: The kelp.it file these settings came from, if any
    """

    keep_comments: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    config_path: Optional[str] = None

    # Store the raw settings for any additional keys
    _raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def unknown_keys(self) -> list[str]:
        """Keys in the settings file that kelp does not recognize, sorted."""
        return sorted(key for key in self._raw if key not in KNOWN_KEYS)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ReaderConfig":
        """
        Load settings for reading ``path``.

        Args:
            path: A kelp.it file, or a source file / directory to search
                  upward from. None searches from the current directory.

        Returns:
            The loaded ReaderConfig, or the defaults if no kelp.it exists.

        Raises:
            ValueError: If the kelp.it file is malformed.
        """
        if path is not None and os.path.basename(path) == CONFIG_FILENAME:
            config_file = os.path.abspath(path)
        else:
            root = find_config_root(path)
            if root is None:
                return cls()
            config_file = os.path.join(root, CONFIG_FILENAME)

        with open(config_file, encoding="utf-8") as f:
            content = f.read()

        try:
            forms = read_str(content)
        except ReaderError as e:
            raise ValueError(f"Failed to parse {config_file}: {e}") from e

        if not forms:
            return cls(config_path=config_file)
        if len(forms) > 1:
            raise ValueError(f"{config_file} must contain a single association list")

        settings = _read_alist(forms[0], config_file)

        keep_comments = settings.get("keep-comments", False)
        max_depth = settings.get("max-depth", DEFAULT_MAX_DEPTH)

        if not isinstance(keep_comments, bool):
            raise ValueError(
                f"keep-comments must be t or nil, got {type(keep_comments).__name__}"
            )
        if isinstance(max_depth, bool) or not isinstance(max_depth, int):
            raise ValueError(
                f"max-depth must be an integer, got {type(max_depth).__name__}"
            )
        if max_depth < 1:
            raise ValueError(f"max-depth must be positive, got {max_depth}")

        return cls(
            keep_comments=keep_comments,
            max_depth=max_depth,
            config_path=config_file,
            _raw=settings,
        )


def _read_alist(form: Token, config_file: str) -> dict[str, Any]:
    if isinstance(form, EmptyList):
        return {}
    if not (isinstance(form, Cons) and form.is_proper_list()):
        raise ValueError(f"{config_file} must contain an association list")
    settings = {}
    for entry in form:
        if not (isinstance(entry, Cons) and isinstance(entry.head, Symbol)):
            raise ValueError(f"{config_file}: expected (key . value), got {entry!r}")
        settings[entry.head.value] = token_to_python(entry.tail)
    return settings


def load_config(path: Optional[str] = None) -> ReaderConfig:
    """Convenience function to load a ReaderConfig."""
    return ReaderConfig.load(path)


__all__ = [
    "CONFIG_FILENAME",
    "KNOWN_KEYS",
    "ReaderConfig",
    "find_config_root",
    "load_config",
    "token_to_python",
]
