"""
Model behaviors
"""
from datetime import datetime, timezone


class TimestampBehavior:
    """Sets created/updated timestamps on a model"""

    def __init__(self, created_field: str = "created_at", updated_field: str = "updated_at"):
        self.created_field = created_field
        self.updated_field = updated_field

    def apply(self, model) -> None:
        now = datetime.now(timezone.utc).isoformat()
        if getattr(model, self.created_field, None) is None:
            setattr(model, self.created_field, now)
        setattr(model, self.updated_field, now)
