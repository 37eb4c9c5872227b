"""
                        Services Module

Contains all business logic. Routers stay thin and delegate here.

Services:
    - ordering: pricing resolver, status state machine, order aggregate
    - access: role-based access policy
    - catalog: categories and menu items
    - users: registration, login/logout, profiles
    - addresses: the caller's delivery address
    - revocation: revoked-token store (in-memory or Redis)
"""
