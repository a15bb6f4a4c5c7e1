from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from models.about_page import ABOUT_SECTIONS


class AliasedModel(BaseModel):
    class Config:
        validate_by_name = True


class WhoWeAre(AliasedModel):
    title: str
    description: str


class VisionMission(AliasedModel):
    vision: str
    mission: str


class TeamMember(AliasedModel):
    name: str
    title: str
    role: Literal['founder', 'co_founder', 'trustee', 'mentor', 'steering_committee']
    description: Optional[str] = None
    image_url: str = Field(..., alias="imageUrl")
    order: int = 0


class CoreValue(AliasedModel):
    category: Literal['personal', 'business', 'motto']
    title: str
    description: str
    icon: Optional[str] = None
    order: int


class Service(AliasedModel):
    title: str
    description: str
    image_url: str = Field(..., alias="imageUrl")
    order: int


class Partner(AliasedModel):
    name: str
    logo_url: str = Field(..., alias="logoUrl")
    website: Optional[str] = None
    order: int


class Inspiration(AliasedModel):
    name: str
    title: str
    description: str
    image_url: str = Field(..., alias="imageUrl")
    order: int = 0


class GlobalReach(AliasedModel):
    title: str
    description: str
    countries: List[str]
    registration: Dict[str, str]  # {india, usa}


class AboutPageUpdate(AliasedModel):
    """Sections to replace. Omitted sections keep their stored value."""
    who_we_are: Optional[WhoWeAre] = Field(None, alias="whoWeAre")
    vision_mission: Optional[VisionMission] = Field(None, alias="visionMission")
    team_members: Optional[List[TeamMember]] = Field(None, alias="teamMembers")
    core_values: Optional[List[CoreValue]] = Field(None, alias="coreValues")
    services: Optional[List[Service]] = None
    partners: Optional[List[Partner]] = None
    inspiration: Optional[Inspiration] = None
    global_reach: Optional[GlobalReach] = Field(None, alias="globalReach")


def about_columns(payload: AboutPageUpdate) -> dict:
    """Explicitly set sections, keyed by column name, stored with their public field names."""
    data = payload.model_dump(by_alias=True, exclude_unset=True)
    return {column: data[name] for name, column in ABOUT_SECTIONS.items() if name in data}
