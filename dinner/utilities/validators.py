"""
Input validation schemas using Pydantic for better data integrity.
"""
import math

from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional, Union
from datetime import date, datetime

from dinner.utilities.constants import PANTRY_STATUSES, PLACEHOLDER_INGREDIENT_NAME


class IngredientInput(BaseModel):
    """Schema for ingredient input validation."""
    name: str = Field(..., max_length=100)
    qty: Optional[Union[int, float]] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    is_essential: bool = True

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('unit')
    @classmethod
    def blank_unit_is_none(cls, v):
        return v or None

    @field_validator('qty')
    @classmethod
    def finite_qty(cls, v):
        if v is not None and not math.isfinite(v):
            raise ValueError('Quantity must be a finite number')
        return v


class RecipeCreateInput(BaseModel):
    """Schema for a hand-entered recipe."""
    title: str = Field(..., min_length=1, max_length=200)
    instructions: str = ""
    ingredients: List[IngredientInput] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate recipe title."""
        if not v.strip():
            raise ValueError('Title is required')
        return v.strip()

    @field_validator('ingredients')
    @classmethod
    def drop_blank_ingredients(cls, v):
        """Rows left empty in the form are ignored."""
        return [ing for ing in v if ing.name]


class IngredientsUpdateInput(BaseModel):
    ingredients: List[IngredientInput] = Field(default_factory=list)

    @field_validator('ingredients')
    @classmethod
    def drop_blank_ingredients(cls, v):
        return [ing for ing in v if ing.name]


class MealLogInput(BaseModel):
    """Schema for logging a recipe as eaten."""
    recipe_id: str = Field(..., min_length=1)
    consumed_at: Optional[datetime] = None
    note: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        """Ensure tags are non-empty strings."""
        return [tag.strip() for tag in v if tag and tag.strip()]


class QuickNoteInput(BaseModel):
    note: str = Field(..., min_length=1, max_length=500)
    consumed_at: Optional[datetime] = None

    @field_validator('note')
    @classmethod
    def validate_note(cls, v):
        if not v.strip():
            raise ValueError('Note is required')
        return v.strip()


class ReuseLastInput(BaseModel):
    target_date: date


class ShoppingItemInput(BaseModel):
    """Schema for shopping list item validation."""
    name: str = Field(..., min_length=1, max_length=100)
    qty: Optional[str] = Field(None, max_length=50)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Item name is required')
        return v.strip()


class StapleStatusInput(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in PANTRY_STATUSES:
            raise ValueError(f"Status must be one of {', '.join(PANTRY_STATUSES)}")
        return v


class ImportScrapeInput(BaseModel):
    url: str = Field(..., min_length=1)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        v = v.strip()
        if not v.lower().startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v


class ExtractedIngredient(BaseModel):
    """One ingredient as returned by the extraction model, coerced leniently."""
    name: str = PLACEHOLDER_INGREDIENT_NAME
    qty: Optional[Union[int, float]] = None
    unit: Optional[str] = None
    is_essential: bool = True

    @field_validator('name', mode='before')
    @classmethod
    def placeholder_name(cls, v):
        if v is None or not str(v).strip():
            return PLACEHOLDER_INGREDIENT_NAME
        return str(v).strip()

    @field_validator('qty', mode='before')
    @classmethod
    def coerce_qty(cls, v):
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        try:
            result = float(v)
        except (TypeError, ValueError):
            return None
        return result if math.isfinite(result) else None

    @field_validator('unit', mode='before')
    @classmethod
    def stringify_unit(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator('is_essential', mode='before')
    @classmethod
    def default_essential(cls, v):
        return True if v is None else bool(v)


class ExtractedRecipe(BaseModel):
    title: str = Field(..., min_length=1)
    instructions: str = ""
    ingredients: List[ExtractedIngredient]

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('title is required')
        return v.strip()

    @field_validator('instructions', mode='before')
    @classmethod
    def default_instructions(cls, v):
        return "" if v is None else str(v)

    @field_validator('ingredients', mode='before')
    @classmethod
    def validate_ingredients(cls, v: Any):
        if not isinstance(v, list):
            raise ValueError('ingredients must be a list')
        return [item if isinstance(item, dict) else {} for item in v]


class ImportSaveInput(BaseModel):
    """Schema for saving a previewed import."""
    recipe: ExtractedRecipe
    source_url: Optional[str] = None
