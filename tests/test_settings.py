"""
Tests for configuration resolution and environment settings.

Tests required options, defaults, normalization and the translation of
validation failures into ConfigurationError.
"""

import pytest


@pytest.mark.unit
class TestResolveConfig:
    """Tests for resolve_config()."""

    def test_defaults(self, params):
        """Test that optional options get their defaults."""
        from sitesource.settings import resolve_config

        config = resolve_config(params)

        assert config.include == []
        assert config.exclude == []
        assert config.attribute_syntax == "yaml"
        assert config.timezone == "UTC"
        assert config.ignore_dot_files is False

    def test_missing_source_root(self):
        """Test that a missing source_root fails."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"text_extensions": ["md"]})

        assert "source_root" in exc_info.value.message

    @pytest.mark.parametrize("root", ["", "   "])
    def test_empty_source_root(self, make_params, root):
        """Test that an empty source_root fails."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError):
            resolve_config(make_params(source_root=root))

    def test_missing_text_extensions(self):
        """Test that text_extensions is required."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"source_root": "/site"})

        assert "text_extensions" in exc_info.value.message

    def test_empty_text_extensions(self, make_params):
        """Test that an empty text_extensions set fails."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError):
            resolve_config(make_params(text_extensions=[]))

    def test_text_extensions_normalized(self, make_params):
        """Test that extensions are lower-cased and stripped of dots."""
        from sitesource.settings import resolve_config

        config = resolve_config(make_params(text_extensions=[".MD", "Html.Twig", " txt "]))

        assert config.text_extensions == frozenset({"md", "html.twig", "txt"})

    def test_text_extensions_from_csv_string(self, make_params):
        """Test that a comma separated string is accepted."""
        from sitesource.settings import resolve_config

        config = resolve_config(make_params(text_extensions="md, html"))

        assert config.text_extensions == frozenset({"md", "html"})

    def test_invalid_attribute_syntax(self, make_params):
        """Test that an unsupported attribute syntax fails."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config(make_params(attribute_syntax="toml"))

        assert "attribute_syntax" in exc_info.value.message

    def test_json_attribute_syntax(self, make_params):
        """Test that json is accepted case-insensitively."""
        from sitesource.settings import resolve_config

        config = resolve_config(make_params(attribute_syntax="JSON"))

        assert config.attribute_syntax == "json"

    def test_unknown_option_rejected(self, make_params):
        """Test that typos in option names fail."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError):
            resolve_config(make_params(text_extension=["md"]))

    def test_unknown_timezone(self, make_params):
        """Test that an unknown timezone fails."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError):
            resolve_config(make_params(timezone="Mars/Olympus_Mons"))

    def test_invalid_exclude_regex(self, make_params):
        """Test that a regex exclude entry must compile."""
        from sitesource.exceptions import ConfigurationError
        from sitesource.settings import resolve_config

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config(make_params(exclude=["/posts/[unclosed/"]))

        assert "exclude" in exc_info.value.message

    def test_single_include_string(self, make_params):
        """Test that a single include path is wrapped in a list."""
        from sitesource.settings import resolve_config

        config = resolve_config(make_params(include=".htaccess", exclude=None))

        assert config.include == [".htaccess"]
        assert config.exclude == []

    def test_config_is_immutable(self, params):
        """Test that the resolved config cannot be modified."""
        from pydantic import ValidationError
        from sitesource.settings import resolve_config

        config = resolve_config(params)

        with pytest.raises(ValidationError):
            config.attribute_syntax = "json"

    def test_resolved_config_passthrough(self, params):
        """Test that a resolved config is returned unchanged."""
        from sitesource.settings import resolve_config

        config = resolve_config(params)

        assert resolve_config(config) is config


@pytest.mark.unit
class TestSourceSettings:
    """Tests for environment-driven settings."""

    def test_as_params_resolves(self):
        """Test that the default settings produce a valid configuration."""
        from sitesource.settings import SourceSettings, resolve_config

        config = resolve_config(SourceSettings().as_params())

        assert "md" in config.text_extensions
        assert "html.twig" in config.text_extensions

    def test_env_overrides(self, monkeypatch):
        """Test that list settings are read from the environment."""
        from sitesource.settings import SourceSettings

        monkeypatch.setenv("SOURCE_TEXT_EXTENSIONS", "md,txt")
        monkeypatch.setenv("SOURCE_EXCLUDE", "drafts, tmp")

        source_settings = SourceSettings()

        assert source_settings.text_extensions == ["md", "txt"]
        assert source_settings.exclude == ["drafts", "tmp"]

    def test_stock_include(self, monkeypatch):
        """Test that .htaccess is force-included by default."""
        from sitesource.settings import SourceSettings

        monkeypatch.delenv("SOURCE_INCLUDE", raising=False)

        assert SourceSettings().include == [".htaccess"]
