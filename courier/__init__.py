"""
Courier: order management service for parcel deliveries.
Orders, delivery fees, sessions and reference data (cities, zones, stores).
"""

__version__ = "0.1.0"
