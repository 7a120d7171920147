"""Menu data models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MenuCategory(BaseModel):
    """A section of the menu."""

    model_config = ConfigDict(frozen=True)

    id: str
    restaurant_id: str
    name: str
    sort_order: int = 0
    is_active: bool = True


class MenuItem(BaseModel):
    """A dish or drink on the menu. price is the authoritative price."""

    model_config = ConfigDict(frozen=True)

    id: str
    restaurant_id: str
    category_id: str | None = None
    name: str
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    allergens: list[str] = Field(default_factory=list)
    dietary_tags: list[str] = Field(default_factory=list)
    is_available: bool = True
    is_featured: bool = False
    sort_order: int = 0
