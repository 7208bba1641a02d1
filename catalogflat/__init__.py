"""
catalogflat – flattens nested course-catalog documents into relational records.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
