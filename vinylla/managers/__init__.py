"""
Vinylla Managers - State owned across the application's lifetime.
"""
from .session import SessionManager

__all__ = ['SessionManager']
