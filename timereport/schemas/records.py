# timereport/schemas/records.py
# Read-only records handed to the report core by the data source.
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

COMPLETED = "completed"

class Employee(BaseModel):
    employee_id: str = Field(min_length=1)
    first_name: str
    last_name: Optional[str] = None

    class Config:
        from_attributes = True

class Location(BaseModel):
    location_id: str = Field(min_length=1)
    name: str

    class Config:
        from_attributes = True

class TimeEntry(BaseModel):
    entry_id: str = Field(min_length=1)
    employee_id: str = Field(min_length=1)
    clock_in_time: datetime
    clock_out_time: Optional[datetime] = None
    status: str

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED and self.clock_out_time is not None

    class Config:
        from_attributes = True

class ActivityLog(BaseModel):
    activity_id: Optional[str] = None
    time_entry_id: str = Field(min_length=1)
    location_id: str = Field(min_length=1)
    check_in_time: datetime
    check_out_time: Optional[datetime] = None

    class Config:
        from_attributes = True
