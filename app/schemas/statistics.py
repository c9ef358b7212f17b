from typing import Literal
from pydantic import BaseModel

TrendType = Literal['issues', 'users', 'flags']


class Overview(BaseModel):
    total_issues: int
    total_users: int
    total_flags: int
    resolution_rate: float


class IssueBreakdown(BaseModel):
    by_status: dict[str, int]
    by_category: dict[str, int]


class RecentActivity(BaseModel):
    new_issues: int
    new_users: int


class TopReporter(BaseModel):
    user_id: str
    username: str
    issue_count: int


class DashboardStats(BaseModel):
    overview: Overview
    issue_breakdown: IssueBreakdown
    recent_activity: RecentActivity
    top_reporters: list[TopReporter]


class TrendPoint(BaseModel):
    date: str
    count: int


class TrendData(BaseModel):
    period: str
    type: TrendType
    data: list[TrendPoint]


class LocationCenter(BaseModel):
    latitude: float
    longitude: float
    radius: float


class LocationSummary(BaseModel):
    total_issues: int
    status_breakdown: dict[str, int]
    category_breakdown: dict[str, int]


class Hotspot(BaseModel):
    latitude: float
    longitude: float
    issue_count: int


class LocationStats(BaseModel):
    location: LocationCenter
    summary: LocationSummary
    hotspots: list[Hotspot]


class IssuesReported(BaseModel):
    total: int
    by_status: dict[str, int]
    recent: int


class CommunityActivity(BaseModel):
    flags_submitted: int
    upvotes_given: int
    upvotes_received: int


class Engagement(BaseModel):
    total_upvotes_received: int
    average_upvotes_per_issue: float


class UserActivityStats(BaseModel):
    issues_reported: IssuesReported
    community: CommunityActivity
    engagement: Engagement
