"""Food reference domain models."""

from pydantic import BaseModel


class FoodRecord(BaseModel):
    """Compact nutrition reference row loaded from the USDA dataset."""

    id: str | None = None
    description: str
    category: str | None = None
    nutrients: object | None = None
