from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Optional


class BaseGolfModel(BaseModel):
    """Shared configuration for mutable capture-side models."""
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Update a field with a user correction. Returns the error message if validation fails."""
        try:
            setattr(self, field_name, value)
            return None
        except ValidationError as e:
            return e.errors()[0]['msg']


class FrozenGolfModel(BaseModel):
    """Derived records that never change once computed."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)
