"""
                UaiFood Ordering Backend

REST backend for a food-ordering web application: categorized menu,
checkout with server-side pricing, and a fixed order status workflow
with role-based access for clients and administrators.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
