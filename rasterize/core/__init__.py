"""
Core Logic
==========

Modules:
- errors: Exception hierarchy
- sizing: Size spec resolution into output geometry
- rendering: Engine adapter and the load/settle/capture orchestrator
"""
