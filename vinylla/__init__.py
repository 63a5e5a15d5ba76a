"""
Vinylla - Terminal browser for a personal record collection.
"""
__version__ = '0.1.0'
