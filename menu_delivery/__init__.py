"""
                Menu Delivery API

Delivery fee estimation for multi-tenant restaurant menus: resolves
Brazilian postal codes (CEP) to coordinates through a chain of public
providers and prices the delivery by distance.
"""

__version__ = "1.0.0"
