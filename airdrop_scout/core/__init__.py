"""
Core utilities: exceptions and the shared TTL cache used by the
metadata and price resolvers.
"""
