"""
Utilities - resume upload handling.
"""
