"""
salonslots - free appointment start times for a salon agenda.
"""

__version__ = "0.1.0"
