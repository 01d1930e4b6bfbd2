"""Repository layer for data persistence.

Repositories encapsulate data access logic and provide a clean interface
for the service layer.
"""

from decision_log.repositories.decision_repo import DecisionRepository

__all__ = [
    "DecisionRepository",
]
