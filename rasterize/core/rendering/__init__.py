"""
Rendering Module
===============

Browser automation for page capture.

Components:
- engine: Engine capability surface and its Playwright implementation
- orchestrator: Load/settle/capture state machine mapped to exit codes
"""
