"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class GhostGameError(Exception):
    pass

class DataLoadError(GhostGameError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(GhostGameError):
    def __init__(self, model: str, field: str, detail: str):
        super().__init__(f"{model}.{field}: {detail}")
        self.model = model
        self.field = field
        self.detail = detail

class BattleStateError(GhostGameError):
    """Raised when the battle flow is driven along an edge it does not have."""
    def __init__(self, current: str, requested: str):
        super().__init__(f"Illegal phase transition {current} -> {requested}")
        self.current = current
        self.requested = requested
