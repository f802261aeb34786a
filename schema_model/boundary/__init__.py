"""
Boundary layer: adapters to external systems (the SQLAlchemy ORM).
"""
