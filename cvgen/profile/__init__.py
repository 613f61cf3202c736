"""Master profile storage.

Public API:
- ProfileService: get, replace, patch a section, delete
- ProfileRepository: database repository for profiles
- MasterProfile: data model for a stored profile
"""

from cvgen.profile.models import MasterProfile
from cvgen.profile.repository import ProfileRepository
from cvgen.profile.service import (
    InvalidProfileDataError,
    ProfileNotFoundError,
    ProfileService,
)

__all__ = [
    "ProfileService",
    "ProfileRepository",
    "MasterProfile",
    "ProfileNotFoundError",
    "InvalidProfileDataError",
]
