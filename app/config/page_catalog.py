"""
Page Catalog
Static, hierarchical declaration of every page/menu key in the back office.
Consumed by the menu filter and the permission editor so both always agree
on the universe of keys. Changes only through code, never through end users.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from app.core.errors import CatalogError


class PageIcon(str, Enum):
    """Presentation icons known to the sidebar. Not read by permission logic."""
    DASHBOARD = "layout-dashboard"
    USER_CIRCLE = "user-circle"
    HOME = "home"
    BED = "bed"
    BRIEFCASE = "briefcase"
    TAG = "tag"
    ACTIVITY = "activity"
    CLIPBOARD_CHECK = "clipboard-check"
    CLOCK = "clock"
    FILE_TEXT = "file-text"
    UTENSILS = "utensils"
    FUEL = "fuel"
    REFRESH = "refresh-ccw"
    SHOPPING_CART = "shopping-cart"
    UPLOAD = "upload"
    PACKAGE = "package"
    USERS = "users"
    BUILDING = "building-2"
    USER_LOCK = "user-lock"
    SETTINGS = "settings"


@dataclass(frozen=True)
class PageNode:
    key: str
    label: str
    icon: PageIcon = PageIcon.FILE_TEXT
    children: Tuple["PageNode", ...] = ()

    @property
    def is_group(self) -> bool:
        return bool(self.children)


def _page(key: str, label: str, icon: PageIcon, *children: PageNode) -> PageNode:
    return PageNode(key=key, label=label, icon=icon, children=tuple(children))


# Declaration order is the sidebar order.
PAGE_CATALOG: Tuple[PageNode, ...] = (
    _page("dashboard", "Dashboard", PageIcon.DASHBOARD),
    _page(
        "employees", "Funcionários", PageIcon.USER_CIRCLE,
        _page("employees_integration", "Integração", PageIcon.USER_CIRCLE),
        _page("employees_list", "Lista de funcionários", PageIcon.USER_CIRCLE),
        _page("employees_transfer", "Transferência", PageIcon.USER_CIRCLE),
        _page("employees_transfers_list", "Histórico de Transferências", PageIcon.USER_CIRCLE),
    ),
    _page("accommodations", "Alojamentos", PageIcon.HOME),
    _page("rooms", "Quartos", PageIcon.BED),
    _page("functions", "Funções", PageIcon.BRIEFCASE),
    _page("categories", "Categorias", PageIcon.TAG),
    _page("status", "Status", PageIcon.ACTIVITY),
    _page("inspection", "Vistorias", PageIcon.CLIPBOARD_CHECK),
    _page("jornada", "Jornada", PageIcon.CLOCK),
    _page("reports", "Relatórios", PageIcon.FILE_TEXT),
    _page("meals", "Refeição", PageIcon.UTENSILS),
    _page("abastecimento", "Abastecimento", PageIcon.FUEL),
    _page("devolucao", "Devolução", PageIcon.REFRESH),
    _page(
        "purchases", "Compras", PageIcon.SHOPPING_CART,
        _page("purchases_xml", "Lançar XML", PageIcon.UPLOAD),
        _page("manual_purchases", "Lançamento Avulso", PageIcon.FILE_TEXT),
        _page("purchases_view", "Visualizar Nota", PageIcon.FILE_TEXT),
    ),
    _page(
        "stock", "Estoque", PageIcon.PACKAGE,
        _page("stock_products", "Cadastro de Produto", PageIcon.PACKAGE),
        _page("product_movement", "Movimentação", PageIcon.PACKAGE),
    ),
    _page("cleaners", "Faxineiras", PageIcon.USERS),
    _page("units", "Unidades", PageIcon.BUILDING),
    _page("users", "Usuários", PageIcon.USERS),
    _page("permissions", "Regras", PageIcon.USER_LOCK),
    _page("settings", "Configurações", PageIcon.SETTINGS),
)


def walk_catalog(
    nodes: Tuple[PageNode, ...] = PAGE_CATALOG,
    depth: int = 0,
    parent_key: Optional[str] = None,
) -> Iterator[Tuple[PageNode, int, Optional[str]]]:
    """Depth-first walk yielding (node, depth, parent_key) in declaration order."""
    for node in nodes:
        yield node, depth, parent_key
        if node.children:
            yield from walk_catalog(node.children, depth + 1, node.key)


def flatten_keys(nodes: Tuple[PageNode, ...] = PAGE_CATALOG) -> List[str]:
    return [node.key for node, _, _ in walk_catalog(nodes)]


def find_node(key: str, nodes: Tuple[PageNode, ...] = PAGE_CATALOG) -> Optional[PageNode]:
    for node, _, _ in walk_catalog(nodes):
        if node.key == key:
            return node
    return None


def validate_catalog(nodes: Tuple[PageNode, ...]) -> FrozenSet[str]:
    """Return the catalog's key set; raise CatalogError on a duplicated key."""
    seen: Dict[str, int] = {}
    for node, _, _ in walk_catalog(nodes):
        seen[node.key] = seen.get(node.key, 0) + 1
    duplicates = sorted(k for k, count in seen.items() if count > 1)
    if duplicates:
        raise CatalogError(f"Duplicated page keys in catalog: {', '.join(duplicates)}")
    return frozenset(seen)


CATALOG_KEYS: FrozenSet[str] = validate_catalog(PAGE_CATALOG)
