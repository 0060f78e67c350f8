"""
mflix backend: data access for users, sessions and movie comments.
"""
