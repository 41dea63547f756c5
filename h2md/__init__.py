"""h2md - HTML to Markdown conversion."""
