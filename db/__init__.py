"""
db/ - Database Layer
====================
Handles database connections, schema initialization, and the errors
the store reports to its callers.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
