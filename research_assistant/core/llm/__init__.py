"""Completion API integration layer.

Kept small on purpose:
- One request per call, no retries and no streaming.
- Failures come back as values, so callers decide the HTTP status.
- No prompt/reply logging.
"""
