"""Shared infrastructure for the SoleCraft client.

Provides settings and base-URL resolution, route and endpoint constants,
and Pydantic models used across the auth and gateway packages.
"""
