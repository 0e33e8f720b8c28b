import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from gigboard.db.snapshot_ops import SnapshotStorage
from gigboard.models.schemas import (
    Bid,
    BidStatus,
    ChatMessage,
    FileUpdate,
    Freelancer,
    FreelancerRating,
    PaymentStatus,
    Project,
    ProjectFeedback,
    ProjectFile,
    ProjectFileCreate,
    ProjectStatus,
    RatingEntry,
    StoreState,
    Uploader,
    new_id,
)

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[StoreState], None]

def _find(items: Iterable[Any], attr: str, value: Any) -> Optional[Any]:
    return next((item for item in items if getattr(item, attr) == value), None)

def _actor_label(who: Uploader) -> str:
    return "Client" if who == "client" else "Developer"

def _patched(record: Any, updates: Dict[str, Any]) -> Optional[Any]:
    """Copy of ``record`` with ``updates`` applied, or None when the result would not validate."""
    patch = {k: v for k, v in updates.items() if k != "id"}
    try:
        return type(record).model_validate({**record.model_dump(), **patch})
    except ValidationError as e:
        logger.warning("Ignoring invalid patch for %s %s: %s", type(record).__name__, record.id, e)
        return None

class ProjectStore:
    """
    Single source of truth for projects, bids, feedback, ratings, the
    freelancer roster and project chat.

    The store is hydrated once from ``storage`` and the full snapshot is
    written back after every mutation, then handed to subscribers. Every
    operation is total: unknown ids turn into no-ops or ``None`` rather
    than errors. Callers are responsible for validating field values and
    state transitions.

    When a snapshot cannot be saved, the in-memory state is rolled back to
    the last saved snapshot and the storage error propagates.
    """

    def __init__(
        self,
        storage: SnapshotStorage,
        key: str = "project-store",
        initial_freelancers: Optional[List[Freelancer]] = None,
    ):
        self.storage = storage
        self.key = key
        self._listeners: List[SnapshotListener] = []

        data = storage.load(key)
        if data is None:
            roster = [f.model_copy() for f in initial_freelancers or []]
            self.state = StoreState(freelancers=roster)
            logger.info("No snapshot under '%s', starting with %d freelancer(s)", key, len(roster))
        else:
            self.state = StoreState.model_validate(data)
            logger.info("Hydrated snapshot '%s' with %d project(s)", key, len(self.state.projects))
        self._persisted = self.snapshot()

    # --- persistence & subscriptions ---

    def snapshot(self) -> Dict[str, Any]:
        return self.state.model_dump(mode="json")

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` with the new state after every mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        snapshot = self.snapshot()
        try:
            self.storage.save(self.key, snapshot)
        except Exception:
            logger.error("Snapshot '%s' not saved, rolling back to the last saved state", self.key)
            self.state = StoreState.model_validate(self._persisted)
            raise
        self._persisted = snapshot
        for listener in list(self._listeners):
            listener(self.state)

    # --- projects ---

    def add_project(self, project: Project) -> None:
        self.state.projects.append(project)
        logger.info("Added project %s", project.id)
        self._commit()

    def get_project_by_id(self, project_id: str) -> Optional[Project]:
        return _find(self.state.projects, "id", project_id)

    def update_project_status(self, project_id: str, status: ProjectStatus) -> None:
        project = self.get_project_by_id(project_id)
        if project is not None:
            project.status = status
        self._commit()

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> None:
        for index, project in enumerate(self.state.projects):
            if project.id == project_id:
                updated = _patched(project, updates)
                if updated is not None:
                    self.state.projects[index] = updated
                break
        self._commit()

    def delete_project(self, project_id: str) -> None:
        # files and the file log live on the project record and go with it
        self.state.projects = [p for p in self.state.projects if p.id != project_id]
        self.state.bids = [b for b in self.state.bids if b.project_id != project_id]
        self.state.project_feedbacks = [f for f in self.state.project_feedbacks if f.project_id != project_id]
        self.state.messages = [m for m in self.state.messages if m.project_id != project_id]
        logger.info("Deleted project %s", project_id)
        self._commit()

    def submit_project(self, project_id: str, submission_url: str) -> None:
        project = self.get_project_by_id(project_id)
        if project is not None:
            project.submission_status = "submitted"
            project.submission_url = submission_url
        self._commit()

    def approve_submission(self, project_id: str) -> None:
        project = self.get_project_by_id(project_id)
        if project is not None:
            project.submission_status = "approved"
        self._commit()

    def update_payment_status(self, project_id: str, status: PaymentStatus) -> None:
        project = self.get_project_by_id(project_id)
        if project is not None:
            project.payment_status = status
        self._commit()

    def get_projects_for_client(self, client_id: str) -> List[Project]:
        return [p for p in self.state.projects if p.client_id == client_id]

    def search_projects(
        self,
        search: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
        skills: Optional[List[str]] = None,
        min_budget: Optional[float] = None,
        max_budget: Optional[float] = None,
        min_timeline: Optional[int] = None,
        max_timeline: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> List[Project]:
        """
        Filter projects the way the dashboards do: text matches name or
        description case-insensitively, a project qualifies on skills if it
        has any of the requested ones, and ranges are inclusive. ``sort_by``
        ('budget' or 'timeline') orders results descending.
        """
        term = search.lower() if search else None
        results = []
        for project in self.state.projects:
            if term and term not in project.name.lower() and term not in project.description.lower():
                continue
            if status is not None and project.status != status:
                continue
            if skills and not any(skill in project.skills for skill in skills):
                continue
            if min_budget is not None and project.budget < min_budget:
                continue
            if max_budget is not None and project.budget > max_budget:
                continue
            if min_timeline is not None and project.timeline < min_timeline:
                continue
            if max_timeline is not None and project.timeline > max_timeline:
                continue
            results.append(project)

        if sort_by in ("budget", "timeline"):
            results.sort(key=lambda p: getattr(p, sort_by), reverse=True)
        return results

    # --- project files ---

    def add_project_file(self, project_id: str, file: ProjectFileCreate) -> Optional[ProjectFile]:
        project = self.get_project_by_id(project_id)
        stored = None
        if project is not None:
            stored = ProjectFile(id=new_id(), **file.model_dump())
            project.project_files.append(stored)
            project.file_updates.append(FileUpdate(
                action="upload",
                file_id=stored.id,
                message=f"{_actor_label(file.uploaded_by)} uploaded {file.name}",
            ))
        self._commit()
        return stored

    def delete_project_file(self, project_id: str, file_id: str, deleted_by: Uploader) -> None:
        project = self.get_project_by_id(project_id)
        target = _find(project.project_files, "id", file_id) if project is not None else None
        if target is not None:
            project.project_files = [f for f in project.project_files if f.id != file_id]
            project.file_updates.append(FileUpdate(
                action="delete",
                file_id=file_id,
                message=f"{_actor_label(deleted_by)} deleted {target.name}",
            ))
        self._commit()

    # --- bids ---

    def add_bid(self, bid: Bid) -> None:
        self.state.bids.append(bid)
        logger.info("Added bid %s on project %s", bid.id, bid.project_id)
        self._commit()

    def get_bid_by_id(self, bid_id: str) -> Optional[Bid]:
        return _find(self.state.bids, "id", bid_id)

    def get_bids_for_project(self, project_id: str) -> List[Bid]:
        return [b for b in self.state.bids if b.project_id == project_id]

    def get_bids_for_freelancer(self, freelancer_id: str) -> List[Bid]:
        return [b for b in self.state.bids if b.freelancer_id == freelancer_id]

    def get_accepted_bid(self, project_id: str) -> Optional[Bid]:
        return next((b for b in self.get_bids_for_project(project_id) if b.status == "accepted"), None)

    def update_bid_status(self, bid_id: str, status: BidStatus) -> None:
        # more than one accepted bid per project is representable here
        bid = self.get_bid_by_id(bid_id)
        if bid is not None:
            bid.status = status
        self._commit()

    def update_bid(self, bid_id: str, updates: Dict[str, Any]) -> None:
        for index, bid in enumerate(self.state.bids):
            if bid.id == bid_id:
                updated = _patched(bid, updates)
                if updated is not None:
                    self.state.bids[index] = updated
                break
        self._commit()

    def delete_bid(self, bid_id: str) -> None:
        self.state.bids = [b for b in self.state.bids if b.id != bid_id]
        self._commit()

    # --- feedback & ratings ---

    def add_project_feedback(self, feedback: ProjectFeedback) -> None:
        self.state.project_feedbacks.append(feedback)
        self._commit()

    def get_project_feedback_for_freelancer(self, freelancer_id: str) -> List[ProjectFeedback]:
        return [f for f in self.state.project_feedbacks if f.freelancer_id == freelancer_id]

    def get_rating_record(self, freelancer_id: str) -> Optional[FreelancerRating]:
        return _find(self.state.freelancer_ratings, "freelancer_id", freelancer_id)

    def update_freelancer_rating(self, freelancer_id: str, rating: int, feedback: Optional[str] = None) -> None:
        record = self.get_rating_record(freelancer_id)
        if record is None:
            record = FreelancerRating(freelancer_id=freelancer_id)
            self.state.freelancer_ratings.append(record)
        record.ratings.append(RatingEntry(rating=rating, feedback=feedback))
        record.average_rating = sum(r.rating for r in record.ratings) / len(record.ratings)
        self._commit()

    def get_freelancer_rating(self, freelancer_id: str) -> float:
        record = self.get_rating_record(freelancer_id)
        return record.average_rating if record is not None else 0

    # --- freelancers ---

    def get_freelancer(self, freelancer_id: str) -> Optional[Freelancer]:
        return _find(self.state.freelancers, "id", freelancer_id)

    def add_freelancer(self, freelancer: Freelancer) -> None:
        self.state.freelancers.append(freelancer)
        logger.info("Registered freelancer %s", freelancer.id)
        self._commit()

    def update_freelancer_earnings(self, freelancer_id: str, amount: float) -> None:
        freelancer = self.get_freelancer(freelancer_id)
        if freelancer is not None:
            freelancer.total_earnings += amount
        self._commit()

    def get_completed_projects_for_freelancer(self, freelancer_id: str) -> List[Project]:
        completed = []
        for project in self.state.projects:
            if project.status != "completed":
                continue
            if any(b.project_id == project.id and b.freelancer_id == freelancer_id and b.status == "accepted"
                   for b in self.state.bids):
                completed.append(project)
        return completed

    # --- chat ---

    def add_message(self, message: ChatMessage) -> None:
        self.state.messages.append(message)
        self._commit()

    def get_messages_for_project(self, project_id: str) -> List[ChatMessage]:
        return [m for m in self.state.messages if m.project_id == project_id]

    # --- workflows ---

    def accept_bid(self, bid_id: str) -> Optional[Bid]:
        """Accept a bid and move its project to in_progress."""
        bid = self.get_bid_by_id(bid_id)
        if bid is None:
            return None
        self.update_bid_status(bid_id, "accepted")
        self.update_project_status(bid.project_id, "in_progress")
        return bid

    def complete_project(
        self,
        project_id: str,
        feedback: ProjectFeedback,
        profile_rating: Optional[int] = None,
        profile_feedback: Optional[str] = None,
    ) -> None:
        """Record the client's review and close the project."""
        self.add_project_feedback(feedback)
        if profile_rating:
            self.update_freelancer_rating(feedback.freelancer_id, profile_rating, profile_feedback)
        self.update_project_status(project_id, "completed")
        self.approve_submission(project_id)

    def complete_payment(self, project_id: str) -> Optional[Project]:
        """
        Mark a project paid. The first time it becomes paid, the accepted
        bid's amount is credited to that freelancer's earnings.
        """
        project = self.get_project_by_id(project_id)
        if project is None:
            return None
        already_paid = project.payment_status == "paid"
        self.update_payment_status(project_id, "paid")
        if not already_paid:
            accepted = self.get_accepted_bid(project_id)
            if accepted is not None:
                self.update_freelancer_earnings(accepted.freelancer_id, accepted.amount)
                logger.info("Credited %s to freelancer %s for project %s", accepted.amount, accepted.freelancer_id, project_id)
        return project
