"""
Presentational primitives rendered from ``templates/components``.

Each helper is a pure function of its arguments and returns ``Markup`` so it
can be embedded in other templates without double escaping. All helpers are
registered as Jinja globals.
"""
from enum import Enum
from typing import Any

from markupsafe import Markup, escape

from billedy.web.templating import templates


class ListLayout(str, Enum):
    LIST = "list"
    TABLE = "table"


class MountState(str, Enum):
    NOT_MOUNTED = "not_mounted"
    MOUNTED = "mounted"


def _render(template_name: str, **context: Any) -> Markup:
    return Markup(templates.env.get_template(template_name).render(**context))


def submit_button(
    label: str,
    is_pending: bool,
    pending_text: str = "Saving...",
    icon: str | None = None,
    disabled: bool = False,
    type: str = "submit",
    class_name: str = "",
) -> Markup:
    return _render(
        "components/submit_button.html",
        label=label,
        is_pending=is_pending,
        pending_text=pending_text,
        icon=icon,
        disabled=is_pending or disabled,
        type=type if type in ("submit", "button") else "submit",
        class_name=class_name,
    )


def loading_button(
    label: str,
    is_loading: bool = False,
    loading_text: str | None = None,
    disabled: bool = False,
    type: str = "button",
    class_name: str = "",
) -> Markup:
    return _render(
        "components/loading_button.html",
        label=label,
        is_loading=is_loading,
        loading_text=loading_text or label,
        disabled=is_loading or disabled,
        type=type,
        class_name=class_name,
    )


def progress_indicator(current: int, total: int = 3, class_name: str = "") -> Markup:
    dots = [i < current for i in range(total)]
    return _render("components/progress_indicator.html", dots=dots, class_name=class_name)


def shimmer_text(text: str, class_name: str = "") -> Markup:
    return _render("components/shimmer_text.html", text=text, class_name=class_name)


def page_skeleton(
    title: str | None = None,
    show_summary: bool = True,
    layout: ListLayout | str = ListLayout.LIST,
    summary_count: int = 4,
    rows: int = 5,
    cols: int = 4,
) -> Markup:
    return _render(
        "components/page_skeleton.html",
        title=title,
        show_summary=show_summary,
        layout=ListLayout(layout),
        summary_count=summary_count,
        rows=rows,
        cols=cols,
    )


def dashboard_skeleton() -> Markup:
    return _render("components/dashboard_skeleton.html", summary_count=4)


class ClientOnly:
    """Defers children until the first client-side pass has run.

    Starts in ``NOT_MOUNTED`` and moves to ``MOUNTED`` exactly once via
    :meth:`mount`. Server-side, ``__html__`` emits the fallback plus the
    children in an inert ``<template>``; ``static/js/client-only.js`` performs
    the swap in the browser.
    """

    def __init__(self, children: Any, fallback: Any = "") -> None:
        self.children = children
        self.fallback = fallback
        self.state = MountState.NOT_MOUNTED

    @property
    def mounted(self) -> bool:
        return self.state is MountState.MOUNTED

    def mount(self) -> None:
        self.state = MountState.MOUNTED

    def render(self) -> Markup:
        return escape(self.children if self.mounted else self.fallback)

    def __html__(self) -> str:
        if self.mounted:
            return str(escape(self.children))
        return str(
            _render(
                "components/client_only.html",
                fallback=escape(self.fallback),
                children=escape(self.children),
            )
        )


def client_only(children: Any, fallback: Any = "") -> ClientOnly:
    return ClientOnly(children, fallback)


templates.env.globals.update(
    submit_button=submit_button,
    loading_button=loading_button,
    progress_indicator=progress_indicator,
    shimmer_text=shimmer_text,
    page_skeleton=page_skeleton,
    dashboard_skeleton=dashboard_skeleton,
    client_only=client_only,
)
