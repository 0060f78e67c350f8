"""
Core configuration, error types and shared utilities.
"""
