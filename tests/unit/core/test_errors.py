import pytest
from utils import errors

def test_raise_local_lore_error():
    """Test raising and catching the base LocalLoreError."""
    with pytest.raises(errors.LocalLoreError):
        raise errors.LocalLoreError("A base error occurred")

def test_raise_validation_error():
    """Test raising and catching ValidationError."""
    with pytest.raises(errors.ValidationError) as excinfo:
        raise errors.ValidationError("No chapters found to create outline from")
    assert "No chapters found" in str(excinfo.value)
    assert isinstance(excinfo.value, errors.LocalLoreError)

def test_not_found_error_message():
    """NotFoundError names the missing entity."""
    error = errors.NotFoundError("Chapter", 42)
    assert str(error) == "Chapter not found"
    assert error.entity == "Chapter"
    assert error.entity_id == 42
    assert isinstance(error, errors.LocalLoreError)

def test_not_found_error_custom_message():
    error = errors.NotFoundError("AI Prompt", 7, message="AI Prompt not found or is system prompt")
    assert str(error) == "AI Prompt not found or is system prompt"

def test_raise_conflict_error():
    """Test raising and catching ConflictError."""
    with pytest.raises(errors.ConflictError) as excinfo:
        raise errors.ConflictError("UNIQUE constraint failed: characters.novel_id, characters.name")
    assert "UNIQUE" in str(excinfo.value)
    assert isinstance(excinfo.value, errors.LocalLoreError)

def test_unsupported_format_is_validation_error():
    """Unsupported export formats are reported like any other bad input."""
    with pytest.raises(errors.ValidationError):
        raise errors.UnsupportedFormatError("Unsupported format. Use: markdown, txt, or html")
