"""Secure import of Helm charts and their container images."""

__version__ = "0.4.0"
