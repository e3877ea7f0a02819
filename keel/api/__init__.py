"""
HTTP entry point for Keel
"""
