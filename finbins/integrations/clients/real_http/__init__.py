"""
Real HTTP integration clients.

Talks to the configured backend origin with httpx. Must return data shaped
exactly like the mock clients.
"""
