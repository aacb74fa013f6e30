"""
redis_table - Tabular access to a Redis key-value store

Issues SQL-like command strings against Redis and reshapes the heterogeneous
native replies into a uniform column/row table with a scrollable cursor.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
