"""Content transforms for Markdeck."""
