"""
Database models package.

Exports:
  - ScenarioModel: Study condition catalog
  - ImageModel: Shared image pool with usage counters
  - SessionModel, SessionStatus: Participant session and lifecycle enum
  - SessionImageModel: Ordered session-image assignments

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from backend.boundary.db.models.scenario_model import ScenarioModel
from backend.boundary.db.models.image_model import ImageModel
from backend.boundary.db.models.session_model import SessionModel, SessionStatus
from backend.boundary.db.models.session_image_model import SessionImageModel

__all__ = [
    "ScenarioModel",
    "ImageModel",
    "SessionModel",
    "SessionStatus",
    "SessionImageModel",
]
