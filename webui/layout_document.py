"""Document adapter over a Dash component tree.

Lets the localization switcher rewrite a Dash layout the same way the
browser script rewrites the static HTML report.
"""

from typing import Iterator, List, Optional

from dash import dcc
from dash.development.base_component import Component


def iter_components(node) -> Iterator[Component]:
    """Yield every component of a layout tree, depth first."""
    if isinstance(node, Component):
        yield node
        yield from iter_components(getattr(node, "children", None))
    elif isinstance(node, (list, tuple)):
        for child in node:
            yield from iter_components(child)


class DashElement:
    """A single Dash component seen as a document element."""

    def __init__(self, component: Component):
        self.component = component

    @property
    def tag_name(self) -> str:
        return type(self.component).__name__.lower()

    def get_attribute(self, name: str) -> Optional[str]:
        return getattr(self.component, name, None)

    def set_text(self, text: str) -> None:
        self.component.children = text

    def set_markup(self, markup: str) -> None:
        if "<" not in markup:
            self.component.children = markup
            return
        self.component.children = dcc.Markdown(
            markup,
            dangerously_allow_html=True,
            style={"display": "inline-block"},
        )

    def toggle_class(self, name: str, force: bool) -> None:
        classes = (getattr(self.component, "className", None) or "").split()
        if force and name not in classes:
            classes.append(name)
        elif not force:
            classes = [c for c in classes if c != name]
        self.component.className = " ".join(classes)


class DashLayoutDocument:
    """Element lookup by id or attribute over a Dash layout."""

    def __init__(self, root: Component):
        self.root = root

    def get_element_by_id(self, element_id: str) -> Optional[DashElement]:
        for component in iter_components(self.root):
            if getattr(component, "id", None) == element_id:
                return DashElement(component)
        return None

    def query_by_attribute(self, name: str) -> List[DashElement]:
        return [
            DashElement(component)
            for component in iter_components(self.root)
            if getattr(component, name, None) is not None
        ]
