"""Bundled data package for the pricing model registry.

This namespace holds the packaged pricing catalog (pricing_models.yaml). It is
not intended for direct import by users.
"""
