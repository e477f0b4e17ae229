# Routes package init
"""
MedTrack Backend: API Routes Package
======================================

Route Inventory:
    - medications.py:  POST   /api/medications        (add a medication)
                       GET    /api/medications        (list with status)
                       GET    /api/medications/{id}   (single medication)
                       DELETE /api/medications/{id}   (remove)
    - health.py:       GET    /health                 (service health check)

Routes stay thin: parse the request, call a service, set headers.
"""
