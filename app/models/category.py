from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    # NULL user_id marks a default category shared by every user
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    parent_category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    category_name = Column(String(100), nullable=False)
    transaction_type = Column(String(10), nullable=False)  # income, expense
    category_icon = Column(String(50), nullable=True)
    category_color = Column(String(20), nullable=True)

    is_default = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="categories")
    parent_category = relationship("Category", remote_side=[id])
    transactions = relationship("Transaction", back_populates="category")
    budgets = relationship("Budget", back_populates="category")
