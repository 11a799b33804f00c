"""
Utilities Package for Endpoint Pinger

Logging setup and small helpers shared by the other packages.
"""
