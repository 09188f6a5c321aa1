"""Adapters to external systems: the session database and the Gemini API."""
