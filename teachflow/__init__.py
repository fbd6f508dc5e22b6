"""
TeachFlow - business management backend for independent teachers
"""

__version__ = "1.0.0"
