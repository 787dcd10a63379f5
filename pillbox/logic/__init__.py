"""Core business logic layer.

Subpackages:
- planner: weekly window rows and planned doses
- intake: taken/not-taken toggles and their stock side effect
- inventory: two-location stock bookkeeping and coverage status
- catalog: medication definitions lifecycle
- session: profile loading and family provisioning
- reporting: structured export of the visible planner
"""
__all__ = ["planner", "intake", "inventory", "catalog", "session", "reporting"]
