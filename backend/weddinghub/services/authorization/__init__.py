"""
Authorization resolvers for booking access.
One resolver per principal role, selected by ``resolver_for``.
"""

from .resolver import AuthorizationResolver, Principal
from .role_resolvers import AdminResolver, CustomerResolver, DenyAllResolver, VendorResolver

__all__ = [
    'AuthorizationResolver', 'Principal',
    'AdminResolver', 'CustomerResolver', 'DenyAllResolver', 'VendorResolver',
]
