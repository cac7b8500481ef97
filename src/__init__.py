"""
SAS Open Metadata Interface Demo Client

A command line client that runs read-only SAS Open Metadata Interface (OMI)
queries against a SAS metadata server and pretty-prints the XML responses.
"""

__version__ = "1.0.0"
__author__ = "OMI Demo Contributors"
__description__ = "Command line demo client for the SAS Open Metadata Interface"
