"""
Service layer.

Each service encapsulates the business rules of one domain and receives
its stores from ``container.build_services``, so API handlers never
touch storage directly.
"""
