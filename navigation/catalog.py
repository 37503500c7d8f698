# navigation/catalog.py
"""
NAVIGATION CATALOG - every navigation entry the platform can show.

Roles pick from this table by id (see ``navigation.roles``). The table is
read-only after import.
"""
from types import MappingProxyType
from typing import Dict, Optional, Tuple

from .types import ItemMetadata, NavigationGroup, NavigationItem

NAVIGATION_VERSION = '1.1.0'


def _item(id, label, href, icon, group=None, permission=None, order=0,
          description=None, badge=None, children=()):
    return NavigationItem(
        id=id,
        label=label,
        href=href,
        icon=icon,
        group=group,
        permission=permission,
        order=order,
        children=children,
        metadata=ItemMetadata(description=description, badge=badge),
    )


_GROUPS = (
    NavigationGroup('overview', 'Dashboard & Overview', icon='home', order=1, collapsible=False),
    NavigationGroup('villages', 'Villages & Tenants', icon='holiday_village', order=2),
    NavigationGroup('households', 'Household Management', icon='home_work', order=3),
    NavigationGroup('finance', 'Fees & Payments', icon='payments', order=4),
    NavigationGroup('community', 'Community', icon='campaign', order=5),
    NavigationGroup('permits', 'Stickers & Permits', icon='local_offer', order=6),
    NavigationGroup('security', 'Security Operations', icon='shield', order=7),
    NavigationGroup('reports', 'Analytics & Reports', icon='assessment', order=8),
)

_ITEMS = (
    # Common - Dashboard for all roles
    _item('dashboard', 'Dashboard', '/dashboard', 'dashboard', group='overview', order=1,
          description='Overview and quick actions'),

    # Superadmin
    _item('villages', 'Village List', '/villages', 'holiday_village', group='villages', order=1,
          permission='manage_villages', description='Manage villages and tenants'),
    _item('users', 'Users', '/users', 'group', group='villages', order=2,
          permission='manage_users', description='Manage system users'),
    _item('superadmin-payments', 'Payments', '/payments', 'payment', group='finance', order=1,
          permission='manage_payments', badge='3', description='Payment processing and billing'),
    _item('reports', 'Reports', '/reports', 'assessment', group='reports', order=1,
          permission='view_reports', description='Analytics and reports',
          children=(
              _item('reports-financial', 'Financial Reports', '/reports/financial', 'paid',
                    group='reports', order=1, permission='view_reports',
                    description='Collections and outstanding balances'),
              _item('reports-households', 'Household Reports', '/reports/households', 'home',
                    group='reports', order=2, permission='view_reports',
                    description='Household growth and occupancy'),
          )),

    # Admin Head
    _item('household-approvals', 'Household Approvals', '/household-approvals', 'approval',
          group='households', order=1, permission='manage_households',
          description='Review and approve household applications'),
    _item('active-households', 'Active Households', '/active-households', 'home',
          group='households', order=2, permission='manage_households',
          description='Manage active household records'),
    _item('fees-management', 'Fees Management', '/fees-management', 'request_quote',
          group='finance', order=2, permission='manage_fees',
          description='Configure and manage fees'),
    _item('payment-status', 'Payment Status', '/payment-status', 'payment',
          group='finance', order=3, permission='manage_fees',
          description='Monitor payment statuses'),
    _item('rules', 'Rules', '/rules', 'rule', group='community', order=2,
          permission='manage_rules', description='Community rules and regulations'),
    _item('announcements', 'Announcements', '/announcements', 'campaign', group='community', order=1,
          permission='manage_announcements', description='Community announcements'),
    _item('construction-permits', 'Construction Permits', '/construction-permits', 'engineering',
          group='permits', order=3, permission='manage_permits',
          description='Construction permit management'),

    # Admin Officer
    _item('household-records', 'Household Records', '/household-records', 'folder',
          group='households', order=3, permission='manage_households',
          description='Household record management'),
    _item('sticker-requests', 'Sticker Requests', '/sticker-requests', 'local_offer',
          group='permits', order=1, permission='manage_stickers',
          description='Process sticker requests'),
    _item('active-stickers', 'Active Stickers', '/active-stickers', 'verified',
          group='permits', order=2, permission='manage_stickers',
          description='Manage active stickers'),
    _item('officer-construction-permits', 'Construction Permits', '/construction-permits', 'engineering',
          group='permits', order=3, permission='manage_permits',
          description='Construction permit processing'),
    _item('manual-payments', 'Manual Payments', '/manual-payments', 'payments',
          group='finance', order=4, permission='manage_fees',
          description='Process manual payments'),
    _item('resident-inquiries', 'Resident Inquiries', '/resident-inquiries', 'help',
          group='community', order=3, permission='handle_inquiries',
          description='Handle resident inquiries'),

    # Household Head
    _item('members', 'Members', '/members', 'people', group='households', order=1,
          permission='manage_household', description='Manage household members'),
    _item('visitor-management', 'Visitor Management', '/visitor-management', 'person_add',
          group='households', order=2, permission='manage_household',
          description='Manage visitor access'),
    _item('active-guest-passes', 'Active Guest Passes', '/active-guest-passes', 'badge',
          group='households', order=3, permission='manage_household',
          description='View active guest passes'),
    _item('household-sticker-requests', 'Sticker Requests', '/sticker-requests', 'local_offer',
          group='permits', order=1, permission='submit_requests',
          description='Submit sticker requests'),
    _item('service-requests', 'Service Requests', '/service-requests', 'build',
          group='community', order=1, permission='submit_requests',
          description='Submit and track service requests'),
    _item('announcements-rules', 'Announcements & Rules', '/announcements-rules', 'info',
          group='community', order=2, permission='view_rules',
          description='View announcements and rules'),
    _item('fee-status', 'Fee Status', '/fee-status', 'receipt', group='finance', order=1,
          permission='view_fees', description='View fee status and payments'),

    # Security Officer
    _item('sticker-validation', 'Sticker Validation', '/sticker-validation', 'verified_user',
          group='security', order=1, permission='validate_stickers',
          description='Validate vehicle stickers'),
    _item('guest-registration', 'Guest Registration', '/guest-registration', 'how_to_reg',
          group='security', order=2, permission='manage_visitors',
          description='Register guests'),
    _item('guest-approval-status', 'Guest Approval Status', '/guest-approval-status', 'pending_actions',
          group='security', order=3, permission='manage_visitors',
          description='Check guest approval status'),
    _item('guest-pass-scan', 'Guest Pass Scan / Entry Log', '/guest-pass-scan', 'qr_code_scanner',
          group='security', order=4, permission='manage_gate_logs',
          description='Scan guest passes and log entries'),
    _item('delivery-logging', 'Delivery Logging', '/delivery-logging', 'local_shipping',
          group='security', order=5, permission='log_deliveries',
          description='Log deliveries and packages'),
    _item('construction-worker-entry', 'Construction Worker Entry', '/construction-worker-entry',
          'construction', group='security', order=6, permission='manage_gate_logs',
          description='Log construction worker entries'),
    _item('incident-report', 'Incident Report', '/incident-report', 'report',
          group='security', order=7, permission='report_incidents',
          description='Report incidents'),
    _item('shift-history', 'Shift History / Logs', '/shift-history', 'history',
          group='security', order=8, permission='manage_gate_logs',
          description='View shift history and logs'),
)

NAVIGATION_ITEMS = MappingProxyType({item.id: item for item in _ITEMS})
NAVIGATION_GROUPS = MappingProxyType({group.id: group for group in _GROUPS})


def get_navigation_item(id: str) -> Optional[NavigationItem]:
    """Top-level catalog entry by id, or None."""
    return NAVIGATION_ITEMS.get(id)


def get_all_navigation_items() -> Dict[str, NavigationItem]:
    return dict(NAVIGATION_ITEMS)


def has_navigation_item(id: str) -> bool:
    return id in NAVIGATION_ITEMS


def get_navigation_by_href(href: str) -> Optional[NavigationItem]:
    for item in NAVIGATION_ITEMS.values():
        if item.href == href:
            return item
    return None


def get_navigation_group(id: str) -> Optional[NavigationGroup]:
    return NAVIGATION_GROUPS.get(id)


def get_all_navigation_groups() -> Tuple[NavigationGroup, ...]:
    return tuple(NAVIGATION_GROUPS.values())
