"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Rasterizer settings and environment configuration
- logging: Structured logging configuration
"""
