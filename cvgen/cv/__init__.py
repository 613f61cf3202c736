"""Generated CV collection.

Public API:
- CVService: list, create, update, duplicate and delete CVs
- CVRepository: database repository for CVs
- GeneratedCV, CVListItem, CVPage: data models
"""

from cvgen.cv.models import CreateCVInput, CVListItem, CVPage, GeneratedCV, UpdateCVInput
from cvgen.cv.repository import CVRepository
from cvgen.cv.service import CVNotFoundError, CVService

__all__ = [
    "CVService",
    "CVRepository",
    "CVNotFoundError",
    "GeneratedCV",
    "CVListItem",
    "CVPage",
    "CreateCVInput",
    "UpdateCVInput",
]
