"""
Client for the SAS Open Metadata Interface (OMI).
"""
