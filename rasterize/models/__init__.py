"""
Data Models
===========

Pydantic data models for invocation arguments, output geometry and render sessions.
"""
