"""careerpath - tolerant recovery of structured career insights from LLM output."""

__version__ = "0.3.0"
