"""
Test suite for the to-do client.

This package contains:
- unit/: models, filters, client, store and controller
- integration/: HTML routes through the Flask test client
- contracts/: consumer-side checks against the task service contract
- security/: output encoding of user-controlled task data
- mocks/: in-memory fake of the remote task service
"""
