"""Static configuration: limits and prompt templates."""
