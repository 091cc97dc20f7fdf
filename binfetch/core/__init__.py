"""
Core configuration and exceptions.
"""
