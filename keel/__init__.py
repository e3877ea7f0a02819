"""
Keel - application bootstrap, service container and error dispatch
"""
__version__ = "0.1.0"
