"""
Pagemark Test Suite

Tests are organized into:
- unit/: Unit tests for individual components
- integration/: Capture-to-library workflows
"""
