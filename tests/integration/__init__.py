"""
Integration tests for the to-do client views.

Tests use the Flask test client with the task service faked and cover:
- Task CRUD through form posts
- Filter chip selection and clearing
- Behaviour when the task service fails
"""
