"""
Top-level package for the Event Registration API.

Organizers publish events, attendees register for them, and the
service keeps every event within its participant capacity.  All
functionality lives in submodules under ``app``; ``client`` provides
an HTTP client for the API.
"""

__all__ = []
