"""Tests for the reader configuration system."""

import json

import pytest

from robust_tree_reader.shared.config import (
    DEFAULT_NULL_TOKEN,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ReaderConfig,
    ScannerConfig,
    SourceConfig,
)


class TestScannerConfig:
    """Test suite for ScannerConfig."""

    def test_default_configuration(self) -> None:
        """Test default scanner configuration values."""
        config = ScannerConfig()

        assert config.blank_glyphs == (" ", "\t", "|")
        assert config.branch_glyphs == ("|-", "`-")
        assert config.null_token == DEFAULT_NULL_TOKEN == "<<<NULL>>>"
        assert config.accept_crlf is True

    def test_lists_are_normalised_to_tuples(self) -> None:
        """Test that glyph lists loaded from JSON become tuples."""
        config = ScannerConfig(blank_glyphs=[" "], branch_glyphs=["+-"])

        assert config.blank_glyphs == (" ",)
        assert config.branch_glyphs == ("+-",)

    def test_multi_character_blank_glyph_rejected(self) -> None:
        """Test that blank glyphs must be single characters."""
        with pytest.raises(ValueError, match="single character"):
            ScannerConfig(blank_glyphs=("  ",))

    def test_single_column_branch_glyph_rejected(self) -> None:
        """Test that branch glyphs must span at least two columns."""
        with pytest.raises(ValueError, match="at least 2 columns"):
            ScannerConfig(branch_glyphs=("-",))

    def test_glyph_shadowing_identifiers_rejected(self) -> None:
        """Test that glyphs cannot start like a node name."""
        with pytest.raises(ValueError, match="shadow node names"):
            ScannerConfig(branch_glyphs=("x-",))

    def test_glyph_with_newline_rejected(self) -> None:
        """Test that line terminators cannot be markup."""
        with pytest.raises(ValueError, match="line terminators"):
            ScannerConfig(blank_glyphs=("\n",))

    def test_empty_null_token_rejected(self) -> None:
        """Test that the null token cannot be empty."""
        with pytest.raises(ValueError, match="null_token cannot be empty"):
            ScannerConfig(null_token="")


class TestSourceAndGlobalConfig:
    """Test suite for SourceConfig and GlobalConfig."""

    def test_source_defaults(self) -> None:
        """Test default source configuration."""
        config = SourceConfig()

        assert config.encoding == "utf-8-sig"
        assert config.fallback_encoding == "latin-1"
        assert config.max_input_size_bytes is None

    def test_source_size_limit_must_be_positive(self) -> None:
        """Test validation of the input size limit."""
        with pytest.raises(ValueError, match="max_input_size_bytes"):
            SourceConfig(max_input_size_bytes=0)

    def test_global_invalid_logging_level(self) -> None:
        """Test validation of the logging level."""
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestReaderConfig:
    """Test suite for the composed ReaderConfig."""

    def test_default_configuration_is_frozen(self) -> None:
        """Test that the composed configuration cannot be mutated."""
        config = ReaderConfig()

        with pytest.raises(Exception):
            config.name = "changed"  # type: ignore[misc]

    def test_null_token_shadowed_by_branch_glyph(self) -> None:
        """Test cross-component validation of the null token."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ReaderConfig(scanner=ScannerConfig(
                branch_glyphs=("<<",), null_token="<<NULL>>"
            ))

        assert exc_info.value.field_name == "scanner.null_token"
        assert exc_info.value.suggestions

    def test_override_nested_field(self) -> None:
        """Test overriding a component field with double-underscore notation."""
        config = ReaderConfig()
        updated = config.override(scanner__null_token="<null>")

        assert updated.scanner.null_token == "<null>"
        assert config.scanner.null_token == DEFAULT_NULL_TOKEN

    def test_override_global_component(self) -> None:
        """Test that global__ addresses the global_ component."""
        updated = ReaderConfig().override(global__enable_profiling=True)

        assert updated.global_.enable_profiling is True

    def test_override_invalid_value_raises(self) -> None:
        """Test that overrides are validated."""
        with pytest.raises(ConfigValidationError):
            ReaderConfig().override(scanner__branch_glyphs=("-",))

    def test_override_unknown_component_raises(self) -> None:
        """Test that misspelt components are reported."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            ReaderConfig().override(scaner__null_token="x")

    def test_json_round_trip(self) -> None:
        """Test serialising and loading a configuration."""
        original = ReaderConfig.unicode()
        restored = ReaderConfig.from_json(original.to_json())

        assert restored == original
        assert json.loads(original.to_json())["scanner"]["branch_glyphs"][-1] == "└─"

    def test_from_dict_rejects_unknown_keys(self) -> None:
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration key"):
            ReaderConfig.from_dict({"scannerz": {}})
        with pytest.raises(ConfigValidationError, match="Unknown scanner settings"):
            ReaderConfig.from_dict({"scanner": {"glyphs": []}})

    def test_from_json_rejects_non_objects(self) -> None:
        """Test that JSON must describe an object."""
        with pytest.raises(ConfigValidationError):
            ReaderConfig.from_json("[1, 2]")
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ReaderConfig.from_json("{not json")

    def test_from_file(self, tmp_path) -> None:
        """Test loading configuration from a file."""
        config_path = tmp_path / "reader.json"
        config_path.write_text(json.dumps({
            "scanner": {"null_token": "<nil>"},
            "name": "custom",
        }))

        config = ReaderConfig.from_file(config_path)

        assert config.scanner.null_token == "<nil>"
        assert config.name == "custom"

    def test_from_missing_file_raises_config_error(self, tmp_path) -> None:
        """Test that an unreadable file is a configuration error."""
        with pytest.raises(ConfigError, match="Could not load config file"):
            ReaderConfig.from_file(tmp_path / "missing.json")


class TestPresets:
    """Test suite for configuration presets."""

    def test_clang_preset(self) -> None:
        """Test the clang preset keeps the default glyphs."""
        config = ReaderConfig.clang()

        assert config.name == "clang"
        assert config.scanner == ScannerConfig()

    def test_unicode_preset_accepts_box_drawing(self) -> None:
        """Test the unicode preset adds box-drawing glyphs."""
        config = ReaderConfig.unicode()

        assert "├─" in config.scanner.branch_glyphs
        assert "│" in config.scanner.blank_glyphs

    def test_strict_preset_rejects_tabs(self) -> None:
        """Test the strict preset drops tabs from the markup."""
        config = ReaderConfig.strict()

        assert "\t" not in config.scanner.blank_glyphs
        assert config.scanner.accept_crlf is False

    def test_preset_lookup(self) -> None:
        """Test looking presets up by name."""
        assert ReaderConfig.preset("unicode").name == "unicode"
        with pytest.raises(ConfigValidationError, match="Unknown preset"):
            ReaderConfig.preset("xml")
