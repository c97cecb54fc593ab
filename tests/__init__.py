"""Test suite for school-auth.

- unit/: Domain rules, adapters and handlers with in-process collaborators
- integration/: SQLAlchemy repository against PostgreSQL (needs
  TEST_DATABASE_URL)
"""
