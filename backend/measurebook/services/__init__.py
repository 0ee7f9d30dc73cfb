# Services package init
"""
Measurebook Backend - Services Layer
======================================

What:  Business logic between routes (HTTP) and stores (persistence).

Service Inventory:
    - normalizer.py:       ensure_and_sort_records, the record tree normalizer
    - project_service.py:  ProjectService, CRUD and bulk-save over a ProjectStore
"""
