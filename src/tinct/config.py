"""ContextVar-based styling configuration for Tinct.

Holds the late-bound collaborators the core consults: the entity table,
the detector registry and the markup recovery knobs. Builders and the
markup parser take an explicit ``config=`` argument; when it is omitted
they read the configuration active in the current context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit (preferred)
    config = StyleConfig(entity_table=MappingEntityTable({"heart": "♥"}))
    builder = StyleBuilder.from_markup("I &heart; it", config=config)

    # Ambient, for a block of code
    with style_config_context(config):
        builder = StyleBuilder.from_markup("I &heart; it")

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType

from tinct.detectors import BUILTIN_DETECTORS, DetectionType, Detector
from tinct.entities import DEFAULT_ENTITY_TABLE, EntityTable

# Elements that never have a closing tag
DEFAULT_VOID_TAGS: frozenset[str] = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    )
)

# Elements replaced by text in the stripped output
DEFAULT_TAG_REPLACEMENTS: Mapping[str, str] = MappingProxyType({"br": "\n"})


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Immutable styling configuration.

    Attributes:
        entity_table: Named entity lookup used when decoding markup text
        detectors: Detector per DetectionType for the convenience styling calls
        void_tags: Lowercased tag names treated as self-closing
        tag_replacements: Lowercased tag name to text inserted in its place
        strip_comments: Remove ``<!-- ... -->`` from markup

    """

    entity_table: EntityTable = DEFAULT_ENTITY_TABLE
    detectors: Mapping[DetectionType, Detector] = field(default_factory=lambda: BUILTIN_DETECTORS)
    void_tags: frozenset[str] = DEFAULT_VOID_TAGS
    tag_replacements: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TAG_REPLACEMENTS)
    strip_comments: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "StyleConfig":
        """Create StyleConfig from dictionary.

        Only includes keys that are valid StyleConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = StyleConfig.from_dict({"strip_comments": False, "x": 1})
            >>> config.strip_comments
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "void_tags" in filtered:
            filtered["void_tags"] = frozenset(t.lower() for t in filtered["void_tags"])
        if "tag_replacements" in filtered:
            filtered["tag_replacements"] = MappingProxyType(
                {k.lower(): v for k, v in filtered["tag_replacements"].items()}
            )
        return cls(**filtered)

    def detector_for(self, kind: DetectionType) -> Detector | None:
        """Registered detector for a single detection type."""
        return self.detectors.get(kind)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: StyleConfig = StyleConfig()

_style_config: ContextVar[StyleConfig] = ContextVar(
    "style_config",
    default=_DEFAULT_CONFIG,
)


def get_style_config() -> StyleConfig:
    """Get current styling configuration (thread-local)."""
    return _style_config.get()


def set_style_config(config: StyleConfig) -> None:
    """Set styling configuration for current context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _style_config.set(config)


def reset_style_config() -> None:
    """Reset to the default configuration."""
    _style_config.set(_DEFAULT_CONFIG)


@contextmanager
def style_config_context(config: StyleConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with style_config_context(StyleConfig(strip_comments=False)):
        ...     get_style_config().strip_comments
        False

    """
    previous = _style_config.get()
    _style_config.set(config)
    try:
        yield
    finally:
        _style_config.set(previous)


__all__ = [
    "DEFAULT_TAG_REPLACEMENTS",
    "DEFAULT_VOID_TAGS",
    "StyleConfig",
    "get_style_config",
    "reset_style_config",
    "set_style_config",
    "style_config_context",
]
