from typing import Optional, List, Literal
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from uuid import uuid4

ProjectStatus = Literal["open", "in_progress", "completed"]
SubmissionStatus = Literal["pending", "submitted", "approved"]
PaymentStatus = Literal["pending", "paid"]
BidStatus = Literal["pending", "accepted", "rejected"]
Uploader = Literal["client", "developer"]
FileAction = Literal["upload", "delete", "update"]

MAX_FILE_SIZE = 5 * 1024 * 1024 # bytes
MAX_FILES_PER_UPLOAD = 5

def new_id() -> str:
    return uuid4().hex

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ProjectFileBase(BaseModel):
    name: str
    size: int = Field(ge=0, le=MAX_FILE_SIZE) # bytes
    type: str # MIME type
    url: str # opaque locator, may be an ephemeral blob handle
    uploaded_by: Uploader

class ProjectFileCreate(ProjectFileBase):
    upload_date: datetime = Field(default_factory=utcnow)

class ProjectFile(ProjectFileCreate):
    id: str = Field(default_factory=new_id)

class FileUpdate(BaseModel):
    timestamp: datetime = Field(default_factory=utcnow)
    action: FileAction
    file_id: str
    message: str

class ProjectBase(BaseModel):
    name: str
    description: str
    budget: float
    timeline: int # days
    skills: List[str] = Field(default_factory=list)

class ProjectCreate(ProjectBase):
    files: List[ProjectFileCreate] = Field(default_factory=list, max_length=MAX_FILES_PER_UPLOAD) # attached right after creation

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    budget: Optional[float] = None
    timeline: Optional[int] = None
    skills: Optional[List[str]] = None

class Project(ProjectBase):
    id: str = Field(default_factory=new_id)
    status: ProjectStatus = "open"
    client_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    submission_status: SubmissionStatus = "pending"
    submission_url: Optional[str] = None
    payment_status: PaymentStatus = "pending"
    project_files: List[ProjectFile] = Field(default_factory=list)
    file_updates: List[FileUpdate] = Field(default_factory=list) # append-only

class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus

class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus

class SubmissionRequest(BaseModel):
    submission_url: str

class BidBase(BaseModel):
    amount: float
    timeline: int # days
    proposal: str

class BidCreate(BidBase):
    project_id: str

class BidUpdate(BaseModel):
    amount: Optional[float] = None
    timeline: Optional[int] = None
    proposal: Optional[str] = None
    status: Optional[BidStatus] = None

class Bid(BidBase):
    id: str = Field(default_factory=new_id)
    project_id: str
    freelancer_id: str
    status: BidStatus = "pending"
    created_at: datetime = Field(default_factory=utcnow)

class BidStatusUpdate(BaseModel):
    status: BidStatus

class FeedbackBase(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = ""

class ProjectFeedback(FeedbackBase):
    id: str = Field(default_factory=new_id)
    project_id: str
    freelancer_id: str
    created_at: datetime = Field(default_factory=utcnow)

class ProjectCompletion(FeedbackBase):
    """Client review closing out a project: project feedback plus an optional profile rating."""
    profile_rating: Optional[int] = Field(default=None, ge=1, le=5)
    profile_feedback: Optional[str] = None

class RatingEntry(BaseModel):
    rating: int
    feedback: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)

class RatingCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    feedback: Optional[str] = None

class FreelancerRating(BaseModel):
    freelancer_id: str
    ratings: List[RatingEntry] = Field(default_factory=list)
    average_rating: float = 0.0 # mean of ratings, recomputed on every append

class FreelancerCreate(BaseModel):
    name: str

class Freelancer(BaseModel):
    id: str
    name: str
    total_earnings: float = 0.0

class EarningsUpdate(BaseModel):
    amount: float

class MessageContent(BaseModel):
    text: str = Field(min_length=1)

class ChatMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    project_id: str
    sender_id: str
    text: str
    timestamp: datetime = Field(default_factory=utcnow)

class StoreState(BaseModel):
    """Everything the store persists, as one snapshot."""
    projects: List[Project] = Field(default_factory=list)
    bids: List[Bid] = Field(default_factory=list)
    project_feedbacks: List[ProjectFeedback] = Field(default_factory=list)
    freelancer_ratings: List[FreelancerRating] = Field(default_factory=list)
    freelancers: List[Freelancer] = Field(default_factory=list)
    messages: List[ChatMessage] = Field(default_factory=list)

class PaymentSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: int = Field(gt=0) # minor currency units
    project_id: str = Field(alias="projectId", min_length=1)
    bid_id: str = Field(alias="bidId", min_length=1)
