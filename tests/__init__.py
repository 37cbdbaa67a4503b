"""
Test suite for term-intel.

Provides tests for all modules:
- Unit tests for each pipeline stage
- End-to-end pipeline tests with in-memory collaborators
- Fixtures and test doubles for common test data
"""
