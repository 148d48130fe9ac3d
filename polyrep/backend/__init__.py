"""
polyrep/backend/__init__.py

Broadcast imports for the backend.
"""

from ..exceptions import NoFeasibleSolutions

backend = None
"""
Global repository for the active backend.
"""
