"""
Data source adapters.
"""
