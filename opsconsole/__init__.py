"""
Delivery Operations Console

Operator console for a delivery fleet: session handling, CRUD over
drivers / routes / orders, and simulation reporting against the
remote logistics API.
"""

__version__ = "0.1.0"
