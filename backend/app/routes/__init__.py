# Routes package init
"""
Car Store Backend — API Routes Package
========================================

Route Inventory:
    - cars.py:    POST/GET /api/cars, GET/PUT/DELETE /api/cars/{carId}
    - orders.py:  POST /api/orders, GET /api/orders/revenue
    - health.py:  GET / and GET /health

Routes stay thin: validate the body, call a service, wrap the result in
the envelope. Error rendering lives in app.main.
"""
