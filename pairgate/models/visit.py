"""Visit counter record stored in the ``visits`` collection."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VisitCounter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int = 0
    last_visit: datetime | None = Field(default=None, alias="lastVisit")
