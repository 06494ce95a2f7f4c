"""
Tests for custom exception classes.

Tests the SourceException hierarchy.
"""

import pytest


@pytest.mark.unit
class TestSourceException:
    """Tests for SourceException base class."""

    def test_source_exception_init(self):
        """Test SourceException initialization."""
        from sitesource.exceptions import SourceException

        exc = SourceException("Test error", path="content/a.md")

        assert exc.message == "Test error"
        assert exc.path == "content/a.md"
        assert str(exc) == "Test error"

    def test_source_exception_default_path(self):
        """Test SourceException without a path."""
        from sitesource.exceptions import SourceException

        assert SourceException("Test error").path is None


@pytest.mark.unit
class TestAttributeParseError:
    """Tests for AttributeParseError."""

    def test_message_names_file(self):
        """Test that the offending file appears in the message."""
        from sitesource.exceptions import AttributeParseError

        exc = AttributeParseError("Malformed YAML attributes", path="/site/content/a.md")

        assert exc.path == "/site/content/a.md"
        assert "/site/content/a.md" in exc.message

    def test_without_path(self):
        """Test AttributeParseError without a path."""
        from sitesource.exceptions import AttributeParseError

        exc = AttributeParseError("Malformed")

        assert exc.message == "Malformed"


@pytest.mark.unit
class TestExceptionInheritance:
    """Tests for exception hierarchy."""

    @pytest.mark.parametrize(
        "name", ["ConfigurationError", "AttributeParseError", "FileAccessError"]
    )
    def test_subclasses_source_exception(self, name):
        """Test every error derives from SourceException."""
        import sitesource.exceptions as exceptions

        exc_class = getattr(exceptions, name)

        assert issubclass(exc_class, exceptions.SourceException)
        assert issubclass(exc_class, Exception)
