"""
HTTP surface: read-only authorization queries and route guards.
"""
