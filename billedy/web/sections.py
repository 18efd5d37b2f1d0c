from dataclasses import dataclass

from billedy.web.components import ListLayout


@dataclass(frozen=True)
class Section:
    slug: str
    title: str
    show_summary: bool = True
    layout: ListLayout = ListLayout.LIST


SECTIONS: tuple[Section, ...] = (
    Section("accounts", "Accounts"),
    Section("budgets", "Budgets"),
    Section("card-purchases", "Card Purchases"),
    Section("categories", "Categories", show_summary=False),
    Section("cycles", "Billing Cycles"),
    Section("savings", "Savings Funds"),
    Section("templates", "Templates", show_summary=False),
    Section("transactions", "Transactions", layout=ListLayout.TABLE),
)

_BY_SLUG = {section.slug: section for section in SECTIONS}


def get_section(slug: str) -> Section | None:
    return _BY_SLUG.get(slug)
