"""
Test Suite
==========

Test suite matching the responsive_images/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Template rendering with real image files
"""
