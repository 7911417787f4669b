"""
Cart API Pydantic Models

Prices and counts accept strings as well as numbers; the cart layer
normalizes them ("599,000 تومان" -> 599000).
"""
from typing import Any

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    name: str
    code: str | None = None  # Generated as {TYPE}-{timestamp} when omitted
    quantity: int | str = 1
    price: int | str
    type: str = "server"
    duration: int | str | None = None
    extras: dict[str, Any] = Field(default_factory=dict)


class UpdateCartItemRequest(BaseModel):
    name: str | None = None
    quantity: int | str | None = None
    price: int | str | None = None
    type: str | None = None
    duration: int | str | None = None
    extras: dict[str, Any] | None = None

    def to_patch(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class SelectServiceRequest(BaseModel):
    name: str
    price: int | str
    type: str = "server"
    code: str | None = None


class ConfirmSelectionRequest(BaseModel):
    duration: int | str = 1
    extras: dict[str, Any] = Field(default_factory=dict)
