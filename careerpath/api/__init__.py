"""
Caller-facing request and response models.

HTTP controllers validate inbound user data with these models and
serialize recovery results as {data, meta} envelopes.
"""
