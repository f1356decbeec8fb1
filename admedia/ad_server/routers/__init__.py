"""
AdMedia API Routers.

Modules:
    auth      – Registration, login, current account
    campaign  – Campaign CRUD, dashboard, analytics
    health    – Health check
"""
