"""
Recipe data models for the recipe pipeline.

This module defines the Pydantic models used to structure recipe data parsed
from unstructured text and the requests and results of recipe scaling. All
models are immutable and serialize to JSON with camelCase keys.
"""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..const import DEFAULT_QUANTITY, DEFAULT_RECIPE_NAME, DEFAULT_UNIT

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _RecipeModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_dict(self) -> dict:
        """Serialize to the JSON shape consumers expect."""
        return self.model_dump(by_alias=True, mode="json")


class ParsedIngredient(_RecipeModel):
    """A structured representation of a single ingredient.

    Attributes:
        name: The name of the ingredient (e.g., 'all-purpose flour')
        quantity: Positive numeric quantity, 1 when unspecified
        unit: Canonical unit of measurement (e.g., 'cup', 'g'), 'piece' by default
        notes: Optional preparation notes (e.g., 'finely chopped')
        group: Optional ingredient group/section (e.g., 'For the dough')
        raw: Optional original ingredient line
        id: Optional caller-supplied identifier
    """

    name: NonEmptyStr = Field(
        description="The name of the ingredient, e.g., 'all-purpose flour'"
    )
    quantity: float = Field(
        default=DEFAULT_QUANTITY,
        gt=0,
        allow_inf_nan=False,
        description="The numeric quantity, e.g., 2.5"
    )
    unit: str = Field(
        default=DEFAULT_UNIT,
        description="The canonical unit of measurement, e.g., 'cup', 'g', 'tbsp'"
    )
    notes: str | None = Field(
        default=None,
        description="Preparation notes, e.g., 'finely chopped'"
    )
    group: str | None = Field(
        default=None,
        description="The ingredient group or section, e.g., 'For the sauce'"
    )
    raw: str | None = Field(
        default=None,
        description="The original ingredient line, e.g., '1 1/2 cups flour'"
    )
    id: int | str | None = Field(
        default=None,
        description="Identifier used to reference the ingredient when scaling"
    )

    @field_validator("unit", mode="before")
    @classmethod
    def _default_blank_unit(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_UNIT
        return value


class ParsedRecipe(_RecipeModel):
    """The top-level schema for a parsed recipe."""

    name: NonEmptyStr = Field(
        default=DEFAULT_RECIPE_NAME,
        description="The title of the recipe"
    )
    description: str = Field(
        default="",
        description="A short description of the recipe"
    )
    ingredients: list[ParsedIngredient] = Field(
        min_length=1,
        description="All ingredients, in recipe order"
    )
    instructions: list[NonEmptyStr] = Field(
        min_length=1,
        description="Ordered preparation steps"
    )
    notes: str | None = Field(
        default=None,
        description="Additional notes about the recipe"
    )
    yield_quantity: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="How much the recipe makes, e.g., 8"
    )
    yield_unit: str | None = Field(
        default=None,
        description="The unit of the yield, e.g., 'servings'"
    )
    prep_time_minutes: int | None = Field(
        default=None,
        ge=0,
        description="Preparation time in minutes"
    )
    cook_time_minutes: int | None = Field(
        default=None,
        ge=0,
        description="Cooking time in minutes"
    )


class ScaleConstraint(_RecipeModel):
    """Scale so that one ingredient reaches a target quantity.

    The reference ingredient is addressed by its position or by its id; the
    target quantity is expressed in that ingredient's existing unit.
    """

    ingredient_index: int | None = None
    ingredient_id: int | str | None = None
    target_quantity: float
    target_unit: str | None = None


class ScaleRequest(_RecipeModel):
    """Exactly one of multiply_by, divide_by or constraint must be set."""

    multiply_by: float | None = None
    divide_by: float | None = None
    constraint: ScaleConstraint | None = None


class ScaledIngredient(ParsedIngredient):
    """An ingredient after scaling, with a note when rounding was significant."""

    rounding_note: str | None = Field(
        default=None,
        description="The pre-rounding value, e.g., 'Rounded from 1.19'"
    )


class ScaledRecipe(ParsedRecipe):
    """A recipe whose ingredient quantities and yield have been rescaled."""

    ingredients: list[ScaledIngredient] = Field(
        min_length=1,
        description="Scaled ingredients, in recipe order"
    )
    scale_factor: float = Field(
        gt=0,
        allow_inf_nan=False,
        description="The factor applied to every quantity"
    )
