"""
Due-date bucketing of assignments.

Sorts a collection of work items into the dashboard buckets ``past``,
``overdue``, ``undated``, ``ungraded``, ``unsubmitted``, ``upcoming`` and
``future``. Buckets overlap: an item can sit in several at once.

Two boundary rules are kept exactly as the dashboard has always shown them:

* ``upcoming`` is inclusive at both ends of ``[now, limit]``.
* ``future`` is everything that is not ``past`` (a set difference, not a
  forward date comparison), so undated items are in ``future`` and an item
  due exactly at ``now`` is both ``upcoming`` and ``future``.

Every function takes an explicit ``now`` for reproducible results; it
defaults to the current UTC time. Permission questions go through a
capability check ``(subject, actor, right) -> bool`` so hosts can plug in
their own authorization.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import cached_property
from typing import Callable, Dict, Iterable, List, Optional, Union

from coursework.data.models.assignment_model import Course, SubmissionRecord, WorkItem
from coursework.data.models.base_model import CapabilityCheck, grants_right
from coursework.data.models.enums import Bucket, Right
from coursework.utils.safe_ops import ensure_aware, safe_list

logger = logging.getLogger(__name__)

VALID_BUCKETS = tuple(Bucket.get_all_values())
DEFAULT_UPCOMING_WINDOW = timedelta(weeks=1)

# (item, actor) -> number of submissions waiting to be graded
NeedsGradingCount = Callable[[WorkItem, Optional[str]], int]


def stored_needs_grading_count(item: WorkItem, actor: Optional[str]) -> int:
    """Read the needs-grading count the host stored on the item."""
    return item.needs_grading_count


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return ensure_aware(now)


def _intersect(first: List[WorkItem], second: List[WorkItem]) -> List[WorkItem]:
    """Items of ``first`` also in ``second``, in ``first`` order, without repeats."""
    wanted = {item.id for item in second}
    seen = set()
    result = []
    for item in first:
        if item.id in wanted and item.id not in seen:
            seen.add(item.id)
            result.append(item)
    return result


def dated(items: Optional[Iterable[WorkItem]]) -> List[WorkItem]:
    """Items that have a due date."""
    return [item for item in safe_list(items) if item.due_at is not None]


def undated(items: Optional[Iterable[WorkItem]]) -> List[WorkItem]:
    """Items that have no due date."""
    return [item for item in safe_list(items) if item.due_at is None]


def past(
    items: Optional[Iterable[WorkItem]], now: Optional[datetime] = None
) -> List[WorkItem]:
    """
    Dated items due strictly before ``now``.

    Args:
        items: Work items
        now: Reference time

    Returns:
        List[WorkItem]: Past items
    """
    now = _resolve_now(now)
    return [item for item in dated(items) if item.due_at < now]


def up_to(items: Optional[Iterable[WorkItem]], time: datetime) -> List[WorkItem]:
    """Dated items due strictly before ``time``."""
    time = ensure_aware(time)
    return [item for item in dated(items) if item.due_at < time]


def down_to(items: Optional[Iterable[WorkItem]], time: datetime) -> List[WorkItem]:
    """Dated items due strictly after ``time``."""
    time = ensure_aware(time)
    return [item for item in dated(items) if item.due_at > time]


def upcoming(
    items: Optional[Iterable[WorkItem]],
    now: Optional[datetime] = None,
    limit: Optional[datetime] = None,
) -> List[WorkItem]:
    """
    Dated items due within ``[now, limit]``, inclusive at both ends.

    Args:
        items: Work items
        now: Reference time
        limit: End of the window, one week after ``now`` by default

    Returns:
        List[WorkItem]: Upcoming items
    """
    now = _resolve_now(now)
    limit = ensure_aware(limit) if limit is not None else now + DEFAULT_UPCOMING_WINDOW
    return [item for item in dated(items) if now <= item.due_at <= limit]


def future(
    items: Optional[Iterable[WorkItem]], now: Optional[datetime] = None
) -> List[WorkItem]:
    """
    All items that are not past, undated ones included.

    Args:
        items: Work items
        now: Reference time

    Returns:
        List[WorkItem]: Items minus past items
    """
    items = safe_list(items)
    past_ids = {item.id for item in past(items, now)}
    return [item for item in items if item.id not in past_ids]


def user_allowed_to_submit(
    items: Optional[Iterable[WorkItem]],
    user: Optional[str],
    capability: CapabilityCheck = grants_right,
) -> List[WorkItem]:
    """Items that expect a submission the user is allowed to make."""
    return [
        item
        for item in safe_list(items)
        if item.expects_submission and capability(item, user, Right.SUBMIT)
    ]


def without_graded_submission(
    items: Optional[Iterable[WorkItem]],
    submissions: Optional[Iterable[SubmissionRecord]],
) -> List[WorkItem]:
    """
    Items the user has neither submitted nor been graded on.

    Submissions are matched to items by assignment id; if several records
    point at the same item the last one wins.

    Args:
        items: Work items
        submissions: The user's submission records

    Returns:
        List[WorkItem]: Items without a matching record, or whose record
        holds neither a submission nor a grade
    """
    by_assignment: Dict[str, SubmissionRecord] = {}
    for submission in safe_list(submissions):
        by_assignment[submission.assignment_id] = submission

    result = []
    for item in safe_list(items):
        match = by_assignment.get(item.id)
        if match is None or match.without_graded_submission():
            result.append(item)
    return result


def overdue(
    items: Optional[Iterable[WorkItem]],
    user: Optional[str],
    submissions: Optional[Iterable[SubmissionRecord]] = None,
    now: Optional[datetime] = None,
    capability: CapabilityCheck = grants_right,
) -> List[WorkItem]:
    """
    Past items the user may still submit and has no graded submission for.

    Args:
        items: Work items
        user: Student identifier
        submissions: The student's submission records
        now: Reference time
        capability: Capability check

    Returns:
        List[WorkItem]: Overdue items
    """
    past_items = past(items, now)
    return _intersect(
        user_allowed_to_submit(past_items, user, capability),
        without_graded_submission(past_items, submissions),
    )


def ungraded_for(
    items: Optional[Iterable[WorkItem]],
    user: Optional[str],
    current_user: Optional[str],
    needs_grading: NeedsGradingCount = stored_needs_grading_count,
    capability: CapabilityCheck = grants_right,
) -> List[WorkItem]:
    """
    Items with submissions waiting for the current user to grade.

    Args:
        items: Work items
        user: User the needs-grading count is computed for
        current_user: Grader whose ``grade`` right is checked
        needs_grading: Needs-grading count lookup
        capability: Capability check

    Returns:
        List[WorkItem]: Items the grader can grade that expect submissions
        and have at least one submission needing grading
    """
    return [
        item
        for item in safe_list(items)
        if capability(item, current_user, Right.GRADE)
        and item.expects_submission
        and needs_grading(item, user) > 0
    ]


def unsubmitted_for(
    course: Optional[Course],
    items: Optional[Iterable[WorkItem]],
    user: Optional[str],
    current_user: Optional[str],
    capability: CapabilityCheck = grants_right,
) -> List[WorkItem]:
    """
    Items the user has not submitted, visible to grade managers only.

    Args:
        course: Course the items belong to
        items: Work items
        user: Student identifier
        current_user: Viewer whose ``manage_grades`` right is checked
        capability: Capability check

    Returns:
        List[WorkItem]: Items expecting a submission for which the user has
        no submission id; empty unless the viewer manages grades on the course
    """
    if course is None or not capability(course, current_user, Right.MANAGE_GRADES):
        return []

    result = []
    for item in safe_list(items):
        if not item.expects_submission:
            continue
        submission = item.submission_for(user)
        if submission is None or not submission.id:
            result.append(item)
    return result


class SortedAssignments:
    """
    Assignments sorted into due-date buckets for one user.

    Each bucket is computed the first time it is read and cached after that.
    """

    def __init__(
        self,
        items: Optional[Iterable[WorkItem]],
        user: Optional[str],
        current_user: Optional[str] = None,
        submissions: Optional[Iterable[SubmissionRecord]] = None,
        course: Optional[Course] = None,
        upcoming_limit: Optional[datetime] = None,
        now: Optional[datetime] = None,
        capability: CapabilityCheck = grants_right,
        needs_grading: NeedsGradingCount = stored_needs_grading_count,
    ):
        self.items = safe_list(items)
        self.user = user
        self.current_user = current_user if current_user is not None else user
        self.submissions = safe_list(submissions)
        self.course = course
        self.now = _resolve_now(now)
        self.upcoming_limit = (
            ensure_aware(upcoming_limit)
            if upcoming_limit is not None
            else self.now + DEFAULT_UPCOMING_WINDOW
        )
        self._capability = capability
        self._needs_grading = needs_grading

    @cached_property
    def past(self) -> List[WorkItem]:
        return past(self.items, self.now)

    @cached_property
    def overdue(self) -> List[WorkItem]:
        return overdue(
            self.items, self.user, self.submissions, self.now, self._capability
        )

    @cached_property
    def undated(self) -> List[WorkItem]:
        return undated(self.items)

    @cached_property
    def ungraded(self) -> List[WorkItem]:
        return ungraded_for(
            self.items,
            self.user,
            self.current_user,
            self._needs_grading,
            self._capability,
        )

    @cached_property
    def unsubmitted(self) -> List[WorkItem]:
        return unsubmitted_for(
            self.course, self.items, self.user, self.current_user, self._capability
        )

    @cached_property
    def upcoming(self) -> List[WorkItem]:
        return upcoming(self.items, self.now, self.upcoming_limit)

    @cached_property
    def future(self) -> List[WorkItem]:
        return future(self.items, self.now)

    def bucket(self, name: Union[str, Bucket]) -> List[WorkItem]:
        """
        Get a bucket by name.

        Raises:
            ValueError: If the name is not a known bucket
        """
        if not isinstance(name, Bucket):
            name = Bucket.from_string(name)
        return getattr(self, name.value)

    def to_dict(self) -> Dict[str, List[str]]:
        """Item ids per bucket, evaluating every bucket."""
        return {
            bucket: [item.id for item in self.bucket(bucket)]
            for bucket in VALID_BUCKETS
        }


def by_due_date(
    items: Optional[Iterable[WorkItem]],
    user: Optional[str],
    current_user: Optional[str] = None,
    submissions: Optional[Iterable[SubmissionRecord]] = None,
    course: Optional[Course] = None,
    upcoming_limit: Optional[datetime] = None,
    now: Optional[datetime] = None,
    capability: CapabilityCheck = grants_right,
    needs_grading: NeedsGradingCount = stored_needs_grading_count,
) -> SortedAssignments:
    """
    Sort assignments into due-date buckets for a user.

    Args:
        items: Work items
        user: Student the buckets are computed for
        current_user: Viewer, defaults to ``user``
        submissions: The student's submission records
        course: Course the items belong to (needed for ``unsubmitted``)
        upcoming_limit: End of the upcoming window
        now: Reference time
        capability: Capability check
        needs_grading: Needs-grading count lookup

    Returns:
        SortedAssignments: Lazily evaluated buckets
    """
    return SortedAssignments(
        items,
        user,
        current_user=current_user,
        submissions=submissions,
        course=course,
        upcoming_limit=upcoming_limit,
        now=now,
        capability=capability,
        needs_grading=needs_grading,
    )


def bucket_filter(
    items: Optional[Iterable[WorkItem]],
    bucket: Union[str, Bucket],
    user: Optional[str],
    current_user: Optional[str] = None,
    course: Optional[Course] = None,
    submissions: Optional[Iterable[SubmissionRecord]] = None,
    observed_users: Optional[Iterable[str]] = None,
    upcoming_limit: Optional[datetime] = None,
    now: Optional[datetime] = None,
    capability: CapabilityCheck = grants_right,
    needs_grading: NeedsGradingCount = stored_needs_grading_count,
) -> List[WorkItem]:
    """
    Narrow a set of assignments down to one bucket.

    Due dates are first overridden for ``user``. When the user observes
    exactly one student, buckets are computed on that student's behalf.

    Args:
        items: Work items to filter
        bucket: Bucket name
        user: Viewing user
        current_user: Acting user, defaults to ``user``
        course: Course the items belong to
        submissions: Submission records of the user being sorted for
        observed_users: Students the user observes
        upcoming_limit: End of the upcoming window
        now: Reference time
        capability: Capability check
        needs_grading: Needs-grading count lookup

    Returns:
        List[WorkItem]: The given items that fall into the bucket, in their
        original order

    Raises:
        ValueError: If the bucket name is unknown
    """
    bucket = Bucket.from_string(bucket) if not isinstance(bucket, Bucket) else bucket
    items = safe_list(items)
    overridden = [item.overridden_for(user) for item in items]

    observed = safe_list(observed_users)
    user_for_sorting = observed[0] if len(observed) == 1 else user
    logger.debug(
        f"Filtering {len(items)} assignments into {bucket.value} for {user_for_sorting}"
    )

    sorted_assignments = by_due_date(
        overridden,
        user_for_sorting,
        current_user=current_user,
        submissions=submissions,
        course=course,
        upcoming_limit=upcoming_limit,
        now=now,
        capability=capability,
        needs_grading=needs_grading,
    )
    wanted = {item.id for item in sorted_assignments.bucket(bucket)}
    return [item for item in items if item.id in wanted]
