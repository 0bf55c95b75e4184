"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows about every table
before the primary store creates its schema.
"""

from bank_sim.models.snapshot import StoredSnapshot  # noqa: F401
