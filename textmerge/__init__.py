"""
Text merge engine.

Reconciles two or more versions of a text into agreed content and
conflicts, and assembles a final text from the decisions made on them.
"""

__version__ = "1.0.0"
