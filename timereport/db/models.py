# timereport/db/models.py
from sqlalchemy import ( Column, String, ForeignKey, DateTime, CheckConstraint )
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

class Employee(Base):
    __tablename__ = "employees"
    employee_id = Column(String(50), primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    entries = relationship("TimeEntry", back_populates="employee")

class Location(Base):
    __tablename__ = "locations"
    location_id = Column(String(50), primary_key=True, index=True)
    name = Column(String(200), nullable=False)

class TimeEntry(Base):
    __tablename__ = "time_entries"
    entry_id = Column(String(50), primary_key=True, index=True)
    employee_id = Column(String(50), ForeignKey("employees.employee_id"), nullable=False, index=True)
    clock_in_time = Column(DateTime(timezone=True), nullable=False)
    clock_out_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False)
    __table_args__ = ( CheckConstraint("status != 'completed' OR clock_out_time IS NOT NULL"), )
    employee = relationship("Employee", back_populates="entries")
    activity_logs = relationship("ActivityLog", back_populates="time_entry")

class ActivityLog(Base):
    __tablename__ = "activity_logs"
    activity_id = Column(String(50), primary_key=True, index=True)
    time_entry_id = Column(String(50), ForeignKey("time_entries.entry_id"), nullable=False, index=True)
    location_id = Column(String(50), ForeignKey("locations.location_id"), nullable=False)
    check_in_time = Column(DateTime(timezone=True), nullable=False)
    check_out_time = Column(DateTime(timezone=True), nullable=True)
    time_entry = relationship("TimeEntry", back_populates="activity_logs")
