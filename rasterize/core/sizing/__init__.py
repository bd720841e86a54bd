"""
Sizing Module
=============

Resolution of command-line size specs into output geometry.
"""
