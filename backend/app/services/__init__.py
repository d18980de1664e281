# Services package init
"""
Car Store Backend — Services Package
======================================

Service Inventory:
    - car_service.py:    CarService — CRUD and search on cars
    - order_service.py:  OrderService — order placement, revenue

Services receive the request's AsyncSession on every call and hold no
per-request state, so one module-level instance of each is shared.
"""
