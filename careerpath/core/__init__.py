"""Core domain: recovery pipeline, insight use cases, ports and models."""
