# Routes package init
"""
WordLog Backend — API Routes Package
=====================================

Route Inventory:
    - words.py:   GET  /api/users   (list word observations, newest first)
                  POST /api/users   (record a word observation)
    - health.py:  GET  /health      (service health check)

Routes stay thin: they resolve dependencies, call the record store and let
the global exception handlers turn errors into responses.
"""
