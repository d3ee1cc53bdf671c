from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class StoreEntity(BaseModel):
    """Common fields of every record kept in the Entity Store.

    Attribute names are snake_case; the store's wire names (``_id``,
    ``licensePlate``, ...) are the aliases, so records fetched from the store
    validate as-is and dump back to the same shape.
    """

    id: Optional[str] = Field(None, alias="_id", description="Opaque record identifier")
    created_date: Optional[datetime] = Field(None, alias="_createdDate", description="Set by the store on create")
    updated_date: Optional[datetime] = Field(None, alias="_updatedDate", description="Set by the store on every write")

    class Config:
        """Pydantic config."""
        alias_generator = to_camel
        populate_by_name = True
        allow_inf_nan = False

    def to_record(self) -> Dict:
        """Dump to the store's wire format, dropping unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
