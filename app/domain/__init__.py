"""Lease rules that do not depend on the database or the web layer.

``lease_lifecycle`` derives status, progress and payment dates from a lease
and an explicit date; ``lease_activity`` expresses the same rules as
SQLAlchemy predicates for the repositories.
"""
