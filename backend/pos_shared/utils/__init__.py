"""
Shared utilities: exceptions, money helpers, API schemas.
"""
