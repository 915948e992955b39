"""Integration tests.

Purpose
- Exercise real interactions with a database migrated by Alembic.

Guidelines
- Each test gets its own SQLite file under tmp_path.
- Minimize mocking; run the real store and engine.
"""
