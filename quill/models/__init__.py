"""
Quill – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``import quill.models``.
"""

from quill.models.user import Role, User  # noqa: F401
from quill.models.idea import Idea        # noqa: F401
from quill.models.text import Text        # noqa: F401
