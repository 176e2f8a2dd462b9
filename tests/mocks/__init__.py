"""
Test doubles for the remote task service.
"""
