"""
Pydantic models of the ESPN scoreboard payload.

Only the fields the normalizer reads are declared; everything the feed may
omit is Optional. Numeric ids and scores are coerced to strings because the
feed is not consistent about quoting them.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")


class ESPNStatusType(FeedModel):
    id: Optional[str] = None
    name: str = ""
    state: str = ""
    completed: bool = False
    description: Optional[str] = None
    detail: Optional[str] = None
    short_detail: Optional[str] = Field(default=None, alias="shortDetail")


class ESPNStatus(FeedModel):
    type: ESPNStatusType = Field(default_factory=ESPNStatusType)


class ESPNVenue(FeedModel):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    city: Optional[str] = None
    state: Optional[str] = None


class ESPNCuratedRank(FeedModel):
    current: Optional[int] = None


class ESPNRecord(FeedModel):
    summary: Optional[str] = None


class ESPNTeam(FeedModel):
    id: str
    name: str = ""
    abbreviation: str = ""
    display_name: str = Field(default="", alias="displayName")
    logo: Optional[str] = None
    color: Optional[str] = None
    alternate_color: Optional[str] = Field(default=None, alias="alternateColor")


class ESPNCompetitor(FeedModel):
    id: Optional[str] = None
    home_away: str = Field(default="", alias="homeAway")
    score: Optional[str] = None
    team: ESPNTeam
    records: Optional[list[ESPNRecord]] = None
    curated_rank: Optional[ESPNCuratedRank] = Field(default=None, alias="curatedRank")


class ESPNBroadcast(FeedModel):
    names: Optional[list[str]] = None


class ESPNCompetition(FeedModel):
    id: Optional[str] = None
    venue: Optional[ESPNVenue] = None
    competitors: list[ESPNCompetitor] = Field(default_factory=list)
    broadcasts: Optional[list[ESPNBroadcast]] = None


class ESPNEvent(FeedModel):
    id: str
    name: str = ""
    date: str = ""
    status: ESPNStatus = Field(default_factory=ESPNStatus)
    competitions: list[ESPNCompetition] = Field(default_factory=list)


class ESPNScoreboardResponse(FeedModel):
    """
    Top-level scoreboard body.

    Events stay raw here so that one malformed event cannot fail the whole
    league; the normalizer validates them one at a time.
    """
    events: list[dict[str, Any]]
