from datetime import datetime, date
from enum import Enum
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class CamelCaseBaseModel(BaseModel):
    """
    Base model with camelCase field aliases and automatic serialization.

    The browser panels and the record store both speak camelCase
    (``dueDate``, ``lastSender``, ``isOwn``) while Python code uses snake_case:

    - Input: camelCase keys (or snake_case names) are accepted.
    - Output: call `model_dump(by_alias=True)` to get camelCase keys back.
    - Auto-serialization: Enums, dates and nested models become plain JSON values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_serializer("*")
    def serialize_any(self, value):
        """Global serializer so values nested in ``Any``/dict fields stay JSON-safe"""

        if isinstance(value, Enum):
            return value.value

        # datetime is a date subclass, both go out as ISO strings
        if isinstance(value, (datetime, date)):
            return value.isoformat()

        if isinstance(value, BaseModel):
            return value.model_dump(by_alias=True)

        if isinstance(value, (list, tuple)):
            return [self.serialize_any(item) for item in value]

        if isinstance(value, dict):
            return {key: self.serialize_any(val) for key, val in value.items()}

        return value
