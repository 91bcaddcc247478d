from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional


class User(BaseModel):
    """An authenticated golfer. Only the id matters to the statistics."""
    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    name: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def default_name_to_email(cls, data):
        if isinstance(data, dict) and not data.get("name") and data.get("email"):
            data = {**data, "name": data["email"]}
        return data
