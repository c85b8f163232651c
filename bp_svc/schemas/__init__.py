"""
Pydantic schemas for readings and profiles.
"""
from bp_svc.schemas.reading import BodyPosition, Profile, Reading

__all__ = [
    "BodyPosition",
    "Profile",
    "Reading",
]
