"""
Fallback version module for cloudwatch-shipper.

Source checkouts and editable installs read the version from here.
"""

__version__ = "0.1.0"
