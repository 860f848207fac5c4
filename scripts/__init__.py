"""
Operational scripts for the Warden services.
"""
