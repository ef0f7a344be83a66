# Routes package init
"""
CBC Exams Backend: API Routes Package
=======================================

Route Inventory:
    - resources.py: GET  /v1/api/resources/                    (keyword search)
                    GET  /v1/api/resources/parent-directories  (directory listing)
    - categories.py: GET /v1/api/categories/                    (static taxonomy)
    - feedback.py:  POST /v1/api/feedback                       (submit)
                    GET  /v1/api/feedback                       (admin listing)
    - health.py:    GET  /health                                (service health)

Routes stay thin: parse the request, call a service, return its model.
"""
