"""
                Restaurant Portal

Branch ingredient availability management for employees and
account sign-up for customers, with hybrid Mock/HTTP service
architecture.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
