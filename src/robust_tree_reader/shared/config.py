"""Configuration classes for robust tree reading.

This module provides configuration objects for the input source, the scanner and
the read as a whole. Component configurations validate themselves on
construction; :class:`ReaderConfig` composes them into one immutable object.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

# Token clang prints in place of a null child
DEFAULT_NULL_TOKEN = "<<<NULL>>>"

CLANG_BLANK_GLYPHS = (" ", "\t", "|")
CLANG_BRANCH_GLYPHS = ("|-", "`-")
UNICODE_BLANK_GLYPHS = (" ", "\t", "|", "│")
UNICODE_BRANCH_GLYPHS = ("|-", "`-", "├─", "└─")

_COMPONENTS = ("scanner", "source", "global_")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class ScannerConfig:
    """Configuration for the listing scanner's character classes."""

    blank_glyphs: Tuple[str, ...] = CLANG_BLANK_GLYPHS
    branch_glyphs: Tuple[str, ...] = CLANG_BRANCH_GLYPHS
    null_token: str = DEFAULT_NULL_TOKEN
    accept_crlf: bool = True

    def __post_init__(self) -> None:
        """Validate scanner configuration."""
        self.blank_glyphs = tuple(self.blank_glyphs)
        self.branch_glyphs = tuple(self.branch_glyphs)
        for glyph in self.blank_glyphs:
            if len(glyph) != 1:
                raise ValueError(f"blank glyph {glyph!r} must be a single character")
        for glyph in self.branch_glyphs:
            if len(glyph) < 2:
                raise ValueError(f"branch glyph {glyph!r} must span at least 2 columns")
        for glyph in self.blank_glyphs + self.branch_glyphs:
            if "\n" in glyph or "\r" in glyph:
                raise ValueError("markup glyphs cannot contain line terminators")
            if glyph[0].isalpha() or glyph[0] == "_":
                raise ValueError(f"markup glyph {glyph!r} would shadow node names")
        if not self.null_token:
            raise ValueError("null_token cannot be empty")
        if any(char.isspace() for char in self.null_token):
            raise ValueError("null_token cannot contain whitespace")


@dataclass
class SourceConfig:
    """Configuration for loading and decoding listing sources."""

    encoding: str = "utf-8-sig"
    fallback_encoding: str = "latin-1"
    max_input_size_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate source configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        if not self.fallback_encoding:
            raise ValueError("fallback_encoding cannot be empty")
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ValueError("max_input_size_bytes must be > 0 or None")


@dataclass
class GlobalConfig:
    """Global settings that apply across all components."""

    logging_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_diagnostics: bool = True
    enable_profiling: bool = False

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


@dataclass(frozen=True)
class ReaderConfig:
    """Complete configuration for reading a tree listing.

    Immutable once built; use :meth:`override` to derive a variant.
    """

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete reader configuration."""
        try:
            self.scanner.__post_init__()
            self.source.__post_init__()
            self.global_.__post_init__()
            self._validate_cross_component_dependencies()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def _validate_cross_component_dependencies(self) -> None:
        overlap = [
            glyph for glyph in self.scanner.branch_glyphs
            if self.scanner.null_token.startswith(glyph)
        ]
        if overlap:
            raise ConfigValidationError(
                f"null_token {self.scanner.null_token!r} starts with branch glyph "
                f"{overlap[0]!r} and could never be recognised",
                field_name="scanner.null_token",
                suggestions=["Choose a null token with a different first character"],
            )

    def override(self, **kwargs: Any) -> "ReaderConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ReaderConfig()
            >>> strict = config.override(scanner__blank_glyphs=(" ", "|"))
            >>> profiled = config.override(global__enable_profiling=True)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                # "global__x" addresses the global_ component
                if component == "global":
                    component = "global_"
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS:
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReaderConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface.
        """
        component_classes = {
            "scanner": ScannerConfig,
            "source": SourceConfig,
            "global_": GlobalConfig,
        }
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_classes:
                target = component_classes[key]
                unknown = set(value) - set(target.__dataclass_fields__)
                if unknown:
                    raise ConfigValidationError(
                        f"Unknown {key} settings: {sorted(unknown)}",
                        field_name=key,
                    )
                try:
                    field_values[key] = target(**value)
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in cls.__dataclass_fields__:
                field_values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}", field_name=key
                )
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ReaderConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReaderConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def clang(cls) -> "ReaderConfig":
        """Preset for clang ``-ast-dump`` listings with ASCII markup."""
        return cls(
            name="clang",
            description="ASCII branch markup as printed by clang's AST dumper",
        )

    @classmethod
    def unicode(cls) -> "ReaderConfig":
        """Preset that also accepts box-drawing markup such as ``├─`` and ``│``."""
        return cls(
            scanner=ScannerConfig(
                blank_glyphs=UNICODE_BLANK_GLYPHS,
                branch_glyphs=UNICODE_BRANCH_GLYPHS,
            ),
            name="unicode",
            description="ASCII and Unicode box-drawing branch markup",
        )

    @classmethod
    def strict(cls) -> "ReaderConfig":
        """Preset that rejects tabs so that column tabulation stays unambiguous."""
        return cls(
            scanner=ScannerConfig(
                blank_glyphs=(" ", "|"),
                accept_crlf=False,
            ),
            source=SourceConfig(encoding="utf-8", fallback_encoding="utf-8"),
            name="strict",
            description="Spaces and ASCII glyphs only, LF line endings",
        )

    @classmethod
    def preset(cls, name: str) -> "ReaderConfig":
        """Look up a preset by name."""
        presets = {
            "clang": cls.clang,
            "unicode": cls.unicode,
            "strict": cls.strict,
        }
        if name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}",
                field_name="preset",
                suggestions=sorted(presets),
            )
        return presets[name]()
