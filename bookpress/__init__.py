"""bookpress: turn a Markdown manuscript into an HTML preview or an EPUB package."""

__version__ = "0.1.0"
