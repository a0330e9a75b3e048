"""
Recovery processing limits and constants.

Centralized caps for the retry loop, generation budget and
diagnostic previews used across the recovery pipeline.
"""

# Retry loop limits
MAX_GENERATION_ATTEMPTS = 3
"""Maximum generation calls per request before returning partial data"""

RETRY_DELAY_SECONDS = 1.0
"""Fixed pause between incomplete attempts (rate-limit courtesy)"""

OVERALL_TIMEOUT_SECONDS = 90.0
"""Wall-clock budget for the whole retry loop, generation calls included"""

# Diagnostics
RAW_PREVIEW_CHARS = 200
"""Characters of raw model output echoed into logs"""

ERROR_CONTEXT_CHARS = 50
"""Characters shown on each side of a JSON decode error position"""
