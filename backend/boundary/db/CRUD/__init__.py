"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from backend.boundary.db.CRUD import session_crud, image_crud

    session = await session_crud.get_with_images(db, session_id)
"""

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.CRUD.scenario_crud import ScenarioCRUD, scenario_crud
from backend.boundary.db.CRUD.image_crud import ImageCRUD, build_candidate_query, image_crud
from backend.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from backend.boundary.db.CRUD.session_image_crud import SessionImageCRUD, session_image_crud

__all__ = [
    "BaseCRUD",
    "ScenarioCRUD",
    "scenario_crud",
    "ImageCRUD",
    "build_candidate_query",
    "image_crud",
    "SessionCRUD",
    "session_crud",
    "SessionImageCRUD",
    "session_image_crud",
]
