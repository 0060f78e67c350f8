"""
FastAPI dependency providers.
"""
