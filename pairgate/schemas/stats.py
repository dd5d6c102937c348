"""Visit and stats schemas."""

from pydantic import BaseModel


class VisitResponse(BaseModel):
    success: bool = True
    count: int


class StatsResponse(BaseModel):
    """Response schema for GET /api/stats (camelCase on the wire)."""

    totalPosts: int
    totalVisits: int
    activeUsers: int
    pairCodes: int
