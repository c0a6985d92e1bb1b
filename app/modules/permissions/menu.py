from dataclasses import replace
from typing import Callable, List, Tuple

from app.config.page_catalog import PageNode
from app.modules.permissions.schemas import MenuItem, PermissionRecord

ResolveFn = Callable[[str], PermissionRecord]


def filter_visible(catalog: Tuple[PageNode, ...], resolve: ResolveFn) -> Tuple[PageNode, ...]:
    """Catalog subset the resolver lets the user view.

    A hidden node takes its whole subtree with it. A group whose children
    are all hidden is dropped too. Declaration order is kept.
    """
    visible: List[PageNode] = []
    for node in catalog:
        if not resolve(node.key).can_view:
            continue
        if node.children:
            children = filter_visible(node.children, resolve)
            if not children:
                continue
            node = replace(node, children=children)
        visible.append(node)
    return tuple(visible)


def flatten_visible(catalog: Tuple[PageNode, ...], resolve: ResolveFn) -> List[str]:
    keys: List[str] = []

    def collect(nodes: Tuple[PageNode, ...]) -> None:
        for node in nodes:
            keys.append(node.key)
            collect(node.children)

    collect(filter_visible(catalog, resolve))
    return keys


def to_menu_items(nodes: Tuple[PageNode, ...]) -> List[MenuItem]:
    return [
        MenuItem(
            key=node.key,
            label=node.label,
            icon=node.icon.value,
            children=to_menu_items(node.children),
        )
        for node in nodes
    ]
