"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No network; temp files only (the disk cache and SQLite live in tmp_path).
- Prefer behaviour-centric assertions over implementation details.
- Keep tests small, fast, and deterministic.
"""
