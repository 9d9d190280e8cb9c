"""Placeholder catalog models served by the public API."""

from pydantic import BaseModel, Field


class Recipe(BaseModel):
    """Recipe card shown on the marketing site."""

    id: int
    name: str
    category: str
    prep_time: int = Field(serialization_alias="prepTime")
    budget: str
    calories: int
    image: str


class Specialist(BaseModel):
    """Nutrition specialist profile."""

    id: int
    name: str
    specialty: str
    experience: str
    rating: float
    image: str


class NutritionSummary(BaseModel):
    """Daily nutrition targets."""

    calories: int
    protein: int
    carbs: int
    fat: int
    fiber: int
    message: str
