# models/tenant_information.py
from sqlalchemy import Column, Integer, JSON, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from .base import Base


class TenantInformation(Base):
     """
     Tenant data attached to a rental.

     The engine does not interpret ``details``; it is stored as submitted.
     ``document_refs`` lists storage references of the uploaded documents.
     """
     __tablename__ = "tenant_information"

     id = Column(Integer, primary_key=True, autoincrement=True)
     rental_id = Column(
          Integer,
          ForeignKey("rentals.id", ondelete="CASCADE"),
          nullable=False,
          unique=True,
     )
     details = Column(JSON, nullable=True)
     document_refs = Column(JSON, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     rental = relationship("Rental", back_populates="tenant_information")

     def __repr__(self):
          return f"<TenantInformation(id={self.id}, rental_id={self.rental_id})>"
