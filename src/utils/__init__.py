"""
Shared utilities for the OMI demo client.
"""
