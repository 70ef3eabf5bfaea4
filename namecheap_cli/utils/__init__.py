"""
Configuration, logging, validation and terminal helpers
"""
