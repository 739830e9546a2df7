"""
Assistance Post Service - community assistance posts for the platform
"""

__version__ = "1.0.0"
