"""Fetch orchestration: rotation, caching, error policy and pacing."""
