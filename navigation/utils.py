# navigation/utils.py
"""
NAVIGATION UTILITIES
====================

Pure functions over navigation items and groups: sorting, grouping,
flattening, searching, active-item resolution and tree rebuilding.

Nothing here performs I/O or mutates its input; every function that
"changes" an item returns a copy made with ``dataclasses.replace``.
"""
import logging
from dataclasses import dataclass, replace
from operator import attrgetter
from typing import Dict, Iterable, List, Optional, Sequence

from core.exceptions import ConfigError

from .types import DEFAULT_GROUP, NavigationGroup, NavigationItem

logger = logging.getLogger(__name__)

MAX_NAVIGATION_DEPTH = 2


# ============================================================================
# 1. SORTING & GROUPING
# ============================================================================

def sort_navigation_items(items: Iterable[NavigationItem]) -> List[NavigationItem]:
    # sorted() is stable, so equal orders keep their input positions
    return sorted(items, key=attrgetter('order'))


def sort_navigation_groups(groups: Iterable[NavigationGroup]) -> List[NavigationGroup]:
    return sorted(groups, key=attrgetter('order'))


def group_navigation_items(items: Iterable[NavigationItem]) -> Dict[str, List[NavigationItem]]:
    """
    Bucket items by their ``group`` id.

    Items without a group land in the ``"default"`` bucket. Buckets keep the
    input order; call ``sort_navigation_items`` on a bucket to order it.
    """
    buckets: Dict[str, List[NavigationItem]] = {}
    for item in items:
        buckets.setdefault(item.group or DEFAULT_GROUP, []).append(item)
    return buckets


def group_navigation_items_with_metadata(items: Iterable[NavigationItem],
                                         groups: Iterable[NavigationGroup]) -> List[dict]:
    """
    One ``{'group': ..., 'items': [...]}`` entry per known group that has items.

    Groups come out sorted by their ``order`` and empty groups are omitted.
    Items pointing at an unknown group are not part of this result; pick
    them up from the ``"default"``/unknown buckets of ``group_navigation_items``.
    """
    buckets = group_navigation_items(items)
    sections = []
    for group in sort_navigation_groups(groups):
        group_items = buckets.get(group.id)
        if group_items:
            sections.append({'group': group, 'items': sort_navigation_items(group_items)})
    return sections


def get_items_by_group(items: Iterable[NavigationItem], group_id: str) -> List[NavigationItem]:
    return [item for item in items if item.group == group_id]


# ============================================================================
# 2. TREE TRAVERSAL
# ============================================================================

def flatten_navigation_items(items: Iterable[NavigationItem]) -> List[NavigationItem]:
    """Depth-first, parent before children."""
    flat = []
    for item in items:
        flat.append(item)
        if item.children:
            flat.extend(flatten_navigation_items(item.children))
    return flat


def flatten_navigation_records(items: Iterable[NavigationItem],
                               parent_id: Optional[str] = None) -> List[NavigationItem]:
    """
    Flatten into parent-linked records: ``parent_id`` set, ``children`` empty.

    ``build_navigation_tree`` turns the result back into the original tree.
    """
    records = []
    for item in items:
        records.append(replace(item, parent_id=parent_id, children=()))
        if item.children:
            records.extend(flatten_navigation_records(item.children, parent_id=item.id))
    return records


def build_navigation_tree(flat_items: Sequence[NavigationItem]) -> List[NavigationItem]:
    """
    Rebuild nesting from records carrying an explicit ``parent_id``.

    Records without a ``parent_id``, or whose parent is not in the list, are
    returned as top-level items. Children keep their input order. Anything
    that would nest deeper than two levels raises ConfigError.
    """
    by_id = {item.id: item for item in flat_items}
    children_of: Dict[str, List[NavigationItem]] = {}
    roots = []

    for item in flat_items:
        if item.parent_id == item.id:
            raise ConfigError(f"Navigation item '{item.id}' is its own parent",
                              details={'item_id': item.id})
        if item.parent_id and item.parent_id in by_id:
            children_of.setdefault(item.parent_id, []).append(item)
        else:
            if item.parent_id:
                logger.warning(f"Navigation item '{item.id}' references unknown parent "
                               f"'{item.parent_id}', treating it as top-level")
            roots.append(item)

    root_ids = {item.id for item in roots}
    for parent_id, children in children_of.items():
        if parent_id not in root_ids:
            raise ConfigError(
                f"Navigation item '{children[0].id}' exceeds the maximum nesting depth "
                f"of {MAX_NAVIGATION_DEPTH}",
                details={'item_id': children[0].id, 'parent_id': parent_id},
            )

    tree = []
    for item in roots:
        children = tuple(item.children) + tuple(children_of.get(item.id, ()))
        if any(child.children for child in children):
            raise ConfigError(
                f"Navigation item '{item.id}' exceeds the maximum nesting depth "
                f"of {MAX_NAVIGATION_DEPTH}",
                details={'item_id': item.id},
            )
        if children != item.children:
            item = replace(item, children=children)
        tree.append(item)
    return tree


def find_item_by_id(items: Iterable[NavigationItem], item_id: str) -> Optional[NavigationItem]:
    for item in flatten_navigation_items(items):
        if item.id == item_id:
            return item
    return None


def find_item_by_href(items: Iterable[NavigationItem], href: str) -> Optional[NavigationItem]:
    """Exact href match at any depth."""
    for item in flatten_navigation_items(items):
        if item.href == href:
            return item
    return None


# ============================================================================
# 3. ACTIVE ITEM & BREADCRUMB TRAIL
# ============================================================================

def normalize_path(path: str) -> str:
    """Drop query string, fragment and trailing slash (``/`` stays ``/``)."""
    path = (path or '').split('?', 1)[0].split('#', 1)[0]
    return path.rstrip('/') or '/'


def _find_exact(items, path):
    for item in items:
        if item.children:
            found = _find_exact(item.children, path)
            if found:
                return found
        if normalize_path(item.href) == path:
            return item
    return None


def find_active_navigation_item(items: Sequence[NavigationItem],
                                current_path: str) -> Optional[NavigationItem]:
    """
    Navigation entry that owns ``current_path``.

    An exact href match anywhere in the tree wins. Otherwise the top-level
    item with the longest href that is a path prefix of ``current_path``
    (``/users`` owns ``/users/999/edit``). Returns None when nothing matches.
    """
    if not current_path:
        return None
    path = normalize_path(current_path)

    exact = _find_exact(items, path)
    if exact:
        return exact

    best = None
    best_href = ''
    for item in items:
        href = normalize_path(item.href)
        # The root link only ever matches exactly
        if href == '/':
            continue
        if path.startswith(href + '/') and len(href) > len(best_href):
            best, best_href = item, href
    return best


def build_breadcrumb_trail(items: Sequence[NavigationItem], target_item) -> List[NavigationItem]:
    """
    Items from the root ancestor down to ``target_item`` (an item or an id).

    Returns ``[]`` when the target is not in ``items``.
    """
    target_id = getattr(target_item, 'id', target_item)

    def walk(nodes, trail):
        for node in nodes:
            path = trail + [node]
            if node.id == target_id:
                return path
            if node.children:
                found = walk(node.children, path)
                if found:
                    return found
        return None

    return walk(items, []) or []


build_breadcrumbs = build_breadcrumb_trail


def mark_active_items(items: Sequence[NavigationItem], current_path: str):
    """
    Return ``(items, active_item)`` with ``is_active`` set on the active item
    and on each of its ancestors. Untouched items are returned as-is.
    """
    active = find_active_navigation_item(items, current_path)
    if active is None:
        return list(items), None

    trail_ids = {item.id for item in build_breadcrumb_trail(items, active)}

    def mark(nodes):
        marked = []
        for node in nodes:
            children = tuple(mark(node.children))
            is_active = node.id in trail_ids
            if is_active != node.is_active or children != node.children:
                node = replace(node, children=children, is_active=is_active)
            marked.append(node)
        return marked

    marked_items = mark(items)
    return marked_items, find_item_by_id(marked_items, active.id)


# ============================================================================
# 4. SEARCH & FILTER
# ============================================================================

def search_navigation_items(items: Iterable[NavigationItem], query: str) -> List[NavigationItem]:
    """Case-insensitive substring match on label and href, over the flattened tree."""
    query = (query or '').lower()
    return [
        item for item in flatten_navigation_items(items)
        if query in item.label.lower() or query in item.href.lower()
    ]


search_navigation = search_navigation_items


@dataclass(frozen=True)
class NavigationFilterOptions:
    """Every criterion that is set must hold (AND); ``None`` means "don't filter"."""
    permissions: Optional[Sequence[str]] = None
    groups: Optional[Sequence[str]] = None
    search: Optional[str] = None
    levels: Optional[Sequence[int]] = None


def _flatten_with_level(items, level=0):
    for item in items:
        yield item, level
        if item.children:
            yield from _flatten_with_level(item.children, level + 1)


def filter_navigation(items: Iterable[NavigationItem],
                      options: Optional[NavigationFilterOptions] = None) -> List[NavigationItem]:
    """Flat list of every item, at any depth, matching all ``options``."""
    from .permissions import can_access_item

    options = options or NavigationFilterOptions()
    query = options.search.lower() if options.search else None

    matched = []
    for item, level in _flatten_with_level(items):
        if options.permissions is not None and not can_access_item(item, options.permissions):
            continue
        if options.groups is not None and item.group not in options.groups:
            continue
        if query and query not in item.label.lower() and query not in item.href.lower():
            continue
        if options.levels is not None and level not in options.levels:
            continue
        matched.append(item)
    return matched


def get_navigation_stats(items: Sequence[NavigationItem],
                         groups: Iterable[NavigationGroup] = ()) -> dict:
    flat = flatten_navigation_items(items)
    permissions = {item.permission for item in flat if item.permission}
    return {
        'total_items': len(flat),
        'total_groups': len(list(groups)),
        'items_with_permissions': sum(1 for item in flat if item.permission),
        'permissions_count': len(permissions),
    }
