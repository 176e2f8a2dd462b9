"""
Routes package for the to-do client.

This package contains the route blueprint:
- views: HTML page routes for the task list, task form, filters and theme
"""
