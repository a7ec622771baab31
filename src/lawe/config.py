"""ContextVar-based configuration for Lawe.

Provides context-local configuration using Python's ContextVars (PEP 567).
The renderer and page processor read the active config; callers override it
for a block of work with ``config_context``.

Thread Safety:
    ContextVars are context-local. Worker threads spawned by the page
    processor receive the config explicitly, so no locks are needed.

Usage:
    from lawe.config import LaweConfig, config_context

    with config_context(LaweConfig(wiki_base="/docs/")):
        html = lawe.convert(source)

"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lawe.nodes import Image

type ImageOptimizer = Callable[[str, "Image"], str]


@dataclass(frozen=True, slots=True)
class LaweConfig:
    """Immutable pipeline configuration.

    Attributes:
        wiki_base: Route prefix for internal wiki links
        image_base_url: Prefix for image ``src`` attributes
        image_link_base_url: Prefix for the repository page an image links to
        setting_base: Route prefix for school pages in info-box cards
        image_optimizer: Optional callable producing the ``<img>`` tag
        strip_empty_lines: Drop blank lines from page source before lexing
        validate_output: Run output-shape checks after rendering
        generate_toc: Collect a table of contents for processed pages
        max_processing_time: Seconds after which a page logs a slow warning
        max_workers: Thread pool size for batch processing
        strict: Re-raise parse errors instead of recovering

    """

    wiki_base: str = "/wiki/"
    image_base_url: str = "https://raw.githubusercontent.com/lorearchive/law-content/main/images"
    image_link_base_url: str = "https://github.com/lorearchive/law-content/tree/main/images"
    setting_base: str = "/wiki/setting/"
    image_optimizer: ImageOptimizer | None = None
    strip_empty_lines: bool = True
    validate_output: bool = True
    generate_toc: bool = True
    max_processing_time: float = 7.0
    max_workers: int = 8
    strict: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "LaweConfig":
        """Create a LaweConfig from a dictionary.

        Unknown keys are silently ignored.

        Example:
            >>> LaweConfig.from_dict({"wiki_base": "/w/", "bogus": 1}).wiki_base
            '/w/'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: LaweConfig = LaweConfig()

_config: ContextVar[LaweConfig] = ContextVar("lawe_config", default=_DEFAULT_CONFIG)


def get_config() -> LaweConfig:
    """Get the active configuration for this context."""
    return _config.get()


def set_config(config: LaweConfig) -> None:
    """Set the configuration for the current context."""
    _config.set(config)


def reset_config() -> None:
    """Reset to the module-level default configuration."""
    _config.set(_DEFAULT_CONFIG)


@contextmanager
def config_context(config: LaweConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with config_context(LaweConfig(strict=True)):
        ...     get_config().strict
        True

    """
    previous = _config.get()
    _config.set(config)
    try:
        yield
    finally:
        _config.set(previous)


__all__ = [
    "ImageOptimizer",
    "LaweConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
]
