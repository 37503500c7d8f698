# navigation/breadcrumbs.py
"""
Breadcrumb trails for the current page.

The trail comes from the navigation tree when the path is known to it and
from the URL segments otherwise (``generate_smart_breadcrumbs``).
"""
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Sequence

from .types import NavigationItem
from .utils import build_breadcrumb_trail, find_active_navigation_item, normalize_path

ELLIPSIS_ID = 'ellipsis'
HOME_ID = 'home'


@dataclass(frozen=True)
class BreadcrumbItem:
    id: str
    label: str
    href: str
    icon: Optional[str] = None
    is_active: bool = False
    is_clickable: bool = True
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class HomeItem:
    label: str = 'Home'
    href: str = '/dashboard'
    icon: Optional[str] = 'home'


@dataclass(frozen=True)
class BreadcrumbConfig:
    max_items: int = 6
    show_icons: bool = True
    make_clickable: bool = True
    separator: str = '/'
    home_item: HomeItem = field(default_factory=HomeItem)


def _home_crumb(config: BreadcrumbConfig, is_current: bool) -> BreadcrumbItem:
    home = config.home_item
    return BreadcrumbItem(
        id=HOME_ID,
        label=home.label,
        href=home.href,
        icon=home.icon if config.show_icons else None,
        is_active=is_current,
        is_clickable=config.make_clickable and not is_current,
    )


def truncate_breadcrumbs(trail: List[BreadcrumbItem], max_items: int) -> List[BreadcrumbItem]:
    """Keep the home crumb and the last ``max_items - 2``, with an ellipsis between."""
    if len(trail) <= max_items:
        return trail
    ellipsis = BreadcrumbItem(id=ELLIPSIS_ID, label='...', href='#', is_clickable=False)
    tail = trail[-(max_items - 2):] if max_items > 2 else []
    return [trail[0], ellipsis] + tail


def generate_breadcrumb_trail(current_path: str, items: Sequence[NavigationItem],
                              config: BreadcrumbConfig = None) -> List[BreadcrumbItem]:
    config = config or BreadcrumbConfig()
    path = normalize_path(current_path)
    home_href = normalize_path(config.home_item.href)

    trail = [_home_crumb(config, path == home_href)]

    active = find_active_navigation_item(items, path)
    nav_trail = [
        item for item in (build_breadcrumb_trail(items, active) if active else [])
        if normalize_path(item.href) != home_href
    ]
    for index, item in enumerate(nav_trail):
        is_last = index == len(nav_trail) - 1
        metadata = None
        if item.metadata:
            metadata = {'description': item.metadata.description, 'external': item.metadata.external}
        trail.append(BreadcrumbItem(
            id=item.id,
            label=item.label,
            href=item.href,
            icon=item.icon if config.show_icons else None,
            is_active=normalize_path(item.href) == path,
            is_clickable=config.make_clickable and not is_last,
            metadata=metadata,
        ))

    return truncate_breadcrumbs(trail, config.max_items)


def format_segment_label(segment: str) -> str:
    return ' '.join(word[:1].upper() + word[1:] for word in segment.split('-'))


def generate_breadcrumbs_from_url(url: str, config: BreadcrumbConfig = None) -> List[BreadcrumbItem]:
    config = config or BreadcrumbConfig(show_icons=False, home_item=HomeItem(href='/'))
    segments = [segment for segment in normalize_path(url).split('/') if segment]

    trail = [_home_crumb(config, not segments)]
    current = ''
    for index, segment in enumerate(segments):
        current += f'/{segment}'
        is_last = index == len(segments) - 1
        trail.append(BreadcrumbItem(
            id=f'segment-{index}',
            label=format_segment_label(segment),
            href=current,
            is_active=is_last,
            is_clickable=config.make_clickable and not is_last,
        ))
    return trail


def generate_smart_breadcrumbs(current_path: str, items: Sequence[NavigationItem],
                               config: BreadcrumbConfig = None) -> List[BreadcrumbItem]:
    """Navigation-based trail, or URL segments when the navigation knows nothing about the path."""
    trail = generate_breadcrumb_trail(current_path, items, config)
    if len(trail) <= 1 and normalize_path(current_path) != normalize_path(trail[0].href):
        return generate_breadcrumbs_from_url(current_path, config)
    return trail


def get_breadcrumb_schema(breadcrumbs: Sequence[BreadcrumbItem]) -> dict:
    """schema.org ``BreadcrumbList`` for embedding as JSON-LD."""
    crumbs = [crumb for crumb in breadcrumbs if crumb.id != ELLIPSIS_ID]
    return {
        '@context': 'https://schema.org',
        '@type': 'BreadcrumbList',
        'itemListElement': [
            {
                '@type': 'ListItem',
                'position': position,
                'name': crumb.label,
                'item': {'@type': 'WebPage', '@id': crumb.href},
            }
            for position, crumb in enumerate(crumbs, start=1)
        ],
    }


def format_breadcrumb_text(breadcrumbs: Sequence[BreadcrumbItem], separator: str = ' > ') -> str:
    return separator.join(crumb.label for crumb in breadcrumbs)


def is_truncated(breadcrumbs: Sequence[BreadcrumbItem]) -> bool:
    return any(crumb.id == ELLIPSIS_ID for crumb in breadcrumbs)
