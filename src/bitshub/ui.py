"""Transient UI state and the intents that only touch it.

``UiState`` holds the signals a rendering layer needs (which surface to show,
the last error, the "added to cart" toast deadline). It is never persisted
and starts fresh on every load.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from bitshub.state import StoreState


class Surface(Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    CART = "cart"
    PROFILE = "profile"
    ADDRESS_FORM = "address_form"


class UiState(BaseModel):
    model_config = ConfigDict(validate_assignment=True, use_enum_values=True)

    surface: Surface | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)
    notice: str | None = None
    added_to_cart_until: datetime | None = None
    selected_address_id: str | None = None
    search_query: str = ""
    search_results: list[str] = Field(default_factory=list)
    selected_category: str = "all"

    @property
    def error(self) -> str | None:
        return next((msgs[0] for msgs in self.errors.values() if msgs), None)

    def shows_added_to_cart(self, now: datetime) -> bool:
        return self.added_to_cart_until is not None and now < self.added_to_cart_until


class UiIntent(BaseModel):
    """An intent that changes nothing but ``UiState``."""

    model_config = ConfigDict(frozen=True)

    def apply(self, ui: UiState, state: "StoreState") -> UiState:
        raise NotImplementedError


class Navigate(UiIntent):
    """Open one of the storefront's overlay surfaces, or close it with ``None``."""

    surface: Surface | None = None

    def apply(self, ui: UiState, state: "StoreState") -> UiState:
        ui.surface = self.surface
        return ui
