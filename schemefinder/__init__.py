"""
SchemeFinder Eligibility Engine

Evaluates citizen profiles against a catalog of government welfare scheme
eligibility rules and keeps per-user eligibility results coherent with
profile and catalog changes.
"""

__version__ = "1.0.0"
__author__ = "SchemeFinder Team"
__description__ = "Rule-based government scheme eligibility engine"
