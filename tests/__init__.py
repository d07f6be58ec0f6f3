"""
Tests package - test suite for catalog-sync.

Contains:
- unit/: Unit tests against an in-memory catalog and alias cache
"""
