"""
MongoDB connection management and repositories.
"""
