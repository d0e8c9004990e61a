"""
utils/ - Shared Helpers
=======================
Logging setup and field validation used by every layer above db/.
"""
