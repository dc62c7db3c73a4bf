"""
SQLAlchemy Database Models

Backs the portal API with:
- The ingredient catalog
- Branches and their unavailable ingredients
- Customer accounts created at sign-up
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from restaurant_portal.database import Base


class Ingredient(Base):
    """
    Catalog entry shared by all branches.

    Identified by its name; branches refer to ingredients by name.
    """
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    ingredient_name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    image_path = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Ingredient {self.ingredient_name}>"


class Branch(Base):
    """
    A restaurant location.

    Ingredients absent from ``unavailable_ingredients`` are available here.
    """
    __tablename__ = "branches"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    unavailable_ingredients = relationship(
        "BranchUnavailableIngredient",
        back_populates="branch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BranchUnavailableIngredient.id",
    )

    @property
    def unavailable_names(self) -> list[str]:
        return [entry.ingredient_name for entry in self.unavailable_ingredients]

    def __repr__(self):
        return f"<Branch {self.id} - {len(self.unavailable_ingredients)} unavailable>"


class BranchUnavailableIngredient(Base):
    """One ingredient marked unavailable at one branch."""
    __tablename__ = "branch_unavailable_ingredients"
    __table_args__ = (
        UniqueConstraint("branch_id", "ingredient_name", name="uq_branch_ingredient"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    branch_id = Column(String(64), ForeignKey("branches.id"), nullable=False, index=True)
    ingredient_name = Column(
        String(100),
        ForeignKey("ingredients.ingredient_name"),
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    branch = relationship("Branch", back_populates="unavailable_ingredients")

    def __repr__(self):
        return f"<Unavailable {self.ingredient_name} @ {self.branch_id}>"


class Customer(Base):
    """
    Customer account created through sign-up.

    Only the salted password hash is stored.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), nullable=False)
    email_address = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Customer #{self.id} - {self.email_address}>"
