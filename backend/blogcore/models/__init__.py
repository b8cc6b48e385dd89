"""ORM Models — SQLAlchemy declarative models used by the SQL backend only.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM rows never leave infrastructure/ — they are converted to core Post values

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from blogcore.models.post import PostRow  # noqa: F401
from blogcore.models.post_category import PostCategoryRow  # noqa: F401
