"""
Application core: lifespan, dependency providers and request helpers.
"""
