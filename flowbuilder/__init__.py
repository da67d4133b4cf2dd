"""
flowbuilder - Flow/Screen transformation engine.

Converts the editor's internal screen graph to the external declarative
flow document and back, and validates both representations.
"""

__version__ = "0.1.0"
