"""
Pydantic Schemas for Request/Response Validation

Wire shapes keep the camelCase field names used by the portal pages
(ingredientName, branchId, emailAddress, _id, ...). Python code uses
the snake_case attribute names; models accept either on input.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, EmailStr
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


def normalize_ingredient_name(name: str) -> str:
    """
    Turn a raw ingredient name into a catalog key.

    Surrounding whitespace is trimmed; the result is matched
    case-sensitively.

    Raises:
        ValueError: If the name is empty after trimming
    """
    if not isinstance(name, str):
        raise ValueError("Ingredient name must be a string")
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Ingredient name must not be empty")
    return cleaned


# =============================================================================
# ENUMS
# =============================================================================

class AvailabilityMethod(str, Enum):
    """
    Mutation verb on a branch's *unavailable* set.

    ADD marks an ingredient unavailable, REMOVE makes it available again.
    """
    ADD = "ADD"
    REMOVE = "REMOVE"

    @classmethod
    def for_availability(cls, available: bool) -> "AvailabilityMethod":
        return cls.REMOVE if available else cls.ADD


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================

class Ingredient(BaseModel):
    """Catalog entry as served by /ingredients."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ingredient_name: str = Field(..., alias="ingredientName", max_length=100, examples=["Lime"])
    description: str = Field(default="", examples=["Freshly squeezed"])
    image_path: Optional[str] = Field(default=None, alias="imagePath")

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return normalize_ingredient_name(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Optional[str]) -> str:
        return v or ""


class IngredientRef(BaseModel):
    """Reference to a catalog ingredient by name."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ingredient_name: str = Field(..., alias="ingredientName")

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return normalize_ingredient_name(v)


class BranchRecord(BaseModel):
    """Branch as served by /currentBranch."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", min_length=1, examples=["downtown"])
    name: Optional[str] = Field(default=None)
    unavailable_ingredients: List[IngredientRef] = Field(
        default_factory=list,
        alias="unavailableIngredients",
    )

    @property
    def unavailable_names(self) -> set[str]:
        return {ref.ingredient_name for ref in self.unavailable_ingredients}


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class UpdateLocationIngredientsRequest(BaseModel):
    """Body of POST /api/updateLocationIngredients."""
    model_config = ConfigDict(populate_by_name=True)

    ingredient_name: str = Field(..., alias="ingredientName", max_length=100, examples=["Gin"])
    branch_id: str = Field(..., alias="branchId", min_length=1, max_length=64, examples=["downtown"])
    method: AvailabilityMethod = Field(..., examples=["ADD"])

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return normalize_ingredient_name(v)


class CustomerRegisterRequest(BaseModel):
    """Body of POST /api/customerRegister."""
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=100, examples=["jdoe"])
    email_address: EmailStr = Field(..., alias="emailAddress", examples=["you@domain.com"])
    password: str = Field(..., max_length=128)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Username must not be blank")
        return cleaned


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class UpdateLocationIngredientsResponse(BaseModel):
    """Result of an availability update."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    branch_id: str = Field(..., alias="branchId")
    ingredient_name: str = Field(..., alias="ingredientName")
    method: AvailabilityMethod
    unavailable_ingredients: List[str] = Field(..., alias="unavailableIngredients")


class CustomerRegisterResponse(BaseModel):
    """Response after a successful registration."""
    success: bool
    message: str
    username: str


class IngredientView(BaseModel):
    """Catalog entry with its availability at a branch."""
    model_config = ConfigDict(populate_by_name=True)

    ingredient_name: str = Field(..., alias="ingredientName")
    description: str
    image_path: Optional[str] = Field(default=None, alias="imagePath")
    available: bool


class ToggleViewResponse(BaseModel):
    """Server-side rendition of the ingredient availability page."""
    model_config = ConfigDict(populate_by_name=True)

    branch_id: str = Field(..., alias="branchId")
    search_query: str = Field(..., alias="searchQuery")
    ingredients: List[IngredientView]
    availability_by_name: Dict[str, bool] = Field(..., alias="availabilityByName")


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    availability_store: str
    account_registrar: str
    catalog_source: str
    timestamp: datetime
