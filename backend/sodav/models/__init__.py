"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of API keys; songs and channels are global entries
    - A detection belongs to a channel and points to at most one song

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from sodav.models.user import User  # noqa: F401
from sodav.models.api_key import ApiKey  # noqa: F401
from sodav.models.song import Song  # noqa: F401
from sodav.models.channel import Channel  # noqa: F401
from sodav.models.detection import Detection, ManualCorrection  # noqa: F401
