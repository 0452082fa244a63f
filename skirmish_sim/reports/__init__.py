"""Text, Markdown and JSON rendering of analysis and engagement results."""
