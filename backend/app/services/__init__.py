# Services package init
"""
WordLog Backend — Services Layer
=================================

What:  The layer between routes (HTTP) and MongoDB (persistence).

Service Inventory:
    - WordObservationStore: validated create and newest-first listing of
      word observations

Services take their collection at construction, so tests can hand them an
in-memory stand-in instead of a live database.
"""
