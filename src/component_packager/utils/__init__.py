"""
Utility helpers (console output and logging).
"""
