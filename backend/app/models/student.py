from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Student(Base, TimestampMixin):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(20), nullable=True)
    age = Column(Integer, nullable=True)

    bookings = relationship("Booking", back_populates="student")

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name})>"
