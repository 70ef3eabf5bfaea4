"""
namecheap-cli: command-line client for the Namecheap registrar API
"""

__version__ = "0.1.0"
