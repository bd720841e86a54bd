"""
Test Suite
==========

Test suite matching the rasterize/ package structure.

Test Categories:
- unit: Unit tests for individual components
"""
