"""
Command line entry point for Keel
"""
