"""Catalogue browsing — free-text search and category filter."""

from typing import TYPE_CHECKING, Literal

from bitshub.catalogue.product import Category, Product
from bitshub.ui import UiIntent, UiState

if TYPE_CHECKING:
    from bitshub.state import StoreState

ALL_CATEGORIES = "all"


def search_products(products: list[Product], query: str) -> list[Product]:
    """Products whose name, description or category contains ``query``.

    An empty query matches nothing.
    """
    needle = query.lower()
    if not needle:
        return []
    return [
        p
        for p in products
        if needle in p.name.lower() or needle in (p.description or "").lower() or needle in p.category.lower()
    ]


def filter_products(products: list[Product], category: str, query: str) -> list[Product]:
    """Products shown in the grid for the selected category and query."""
    needle = query.lower()
    return [
        p
        for p in products
        if (category == ALL_CATEGORIES or p.category == category)
        and (needle in p.name.lower() or needle in (p.description or "").lower())
    ]


class SetSearchQuery(UiIntent):
    query: str

    def apply(self, ui: UiState, state: "StoreState") -> UiState:
        ui.search_query = self.query
        ui.search_results = [p.id for p in search_products(state.products, self.query)]
        return ui


class SelectCategory(UiIntent):
    category: Category | Literal["all"]

    def apply(self, ui: UiState, state: "StoreState") -> UiState:
        category = self.category
        ui.selected_category = category.value if isinstance(category, Category) else category
        return ui
