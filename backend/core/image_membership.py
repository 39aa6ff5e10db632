"""
Image-set membership checks.

Cross-checks a submitted list of image ids against a session's assigned
set before progress or completion is accepted.

Dependencies: backend.core.exceptions
System role: Boundary invariant shared by progress and finalize
"""

from collections import Counter
from typing import Iterable, Sequence

from backend.core.exceptions import ImageSetMismatchError


def check_image_membership(
    assigned_ids: Iterable[str],
    submitted_ids: Sequence[str],
    exact: bool = False,
    session_id: object = None,
) -> None:
    """
    Verify submitted image ids against the assigned set.

    Args:
        assigned_ids: Image ids assigned to the session
        submitted_ids: Image ids found in the submission, in order
        exact: Also require every assigned id to be present
        session_id: Session id reported in the error details

    Raises:
        ImageSetMismatchError: duplicate_image_ids, unassigned_image_ids or
            missing_assigned_image_ids
    """
    assigned = set(assigned_ids)

    duplicates = sorted(i for i, n in Counter(submitted_ids).items() if n > 1)
    if duplicates:
        raise ImageSetMismatchError("duplicate_image_ids", duplicates, session_id)

    unassigned = sorted(i for i in set(submitted_ids) if i not in assigned)
    if unassigned:
        raise ImageSetMismatchError("unassigned_image_ids", unassigned, session_id)

    if exact:
        missing = sorted(assigned.difference(submitted_ids))
        if missing:
            raise ImageSetMismatchError("missing_assigned_image_ids", missing, session_id)
