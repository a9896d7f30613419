"""Test fixtures for nativegen tests.

- projects: project documents, on-disk project folders and in-memory
  resolved contexts

Import fixtures in your tests using:
    from tests.fixtures.projects import files, core_app_data
"""

__all__ = [
    "projects",
]
