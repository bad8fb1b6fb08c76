"""SQLAlchemy ORM models for the loan catalog"""

from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class BankRecord(Base):
    """Bank offering loan products"""

    __tablename__ = "bank"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    loans = relationship("LoanRecord", back_populates="bank")


class LoanRecord(Base):
    """Loan product; position preserves catalog insertion order"""

    __tablename__ = "loan_product"

    id = Column(Text, primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    bank_id = Column(Text, ForeignKey("bank.id"), nullable=False)
    loan_type = Column(String(16), nullable=False, index=True)
    interest_rate = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)
    min_amount = Column(Numeric(16, 2), nullable=False)
    max_amount = Column(Numeric(16, 2), nullable=False)
    max_term_months = Column(Integer, nullable=False)
    eligibility_note = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    bank = relationship("BankRecord", back_populates="loans", lazy="joined")
