from sqlalchemy import Column, Integer, DateTime, func
from database import Base, JSONType, utcnow

# Public section name -> column. List sections default to [], the rest to None.
ABOUT_SECTIONS = {
    'whoWeAre': 'who_we_are',
    'visionMission': 'vision_mission',
    'teamMembers': 'team_members',
    'coreValues': 'core_values',
    'services': 'services',
    'partners': 'partners',
    'inspiration': 'inspiration',
    'globalReach': 'global_reach',
}
LIST_SECTIONS = ('teamMembers', 'coreValues', 'services', 'partners')


def empty_about_sections() -> dict:
    return {name: [] if name in LIST_SECTIONS else None for name in ABOUT_SECTIONS}


class AboutPage(Base):
    """The About page document. A single row is kept."""
    __tablename__ = 'about_page'

    id = Column(Integer, primary_key=True)
    who_we_are = Column(JSONType, nullable=True)  # {title, description}
    vision_mission = Column(JSONType, nullable=True)  # {vision, mission}
    team_members = Column(JSONType, nullable=True)  # [{name, title, role, description, imageUrl, order}]
    core_values = Column(JSONType, nullable=True)  # [{category, title, description, icon, order}]
    services = Column(JSONType, nullable=True)  # [{title, description, imageUrl, order}]
    partners = Column(JSONType, nullable=True)  # [{name, logoUrl, website, order}]
    inspiration = Column(JSONType, nullable=True)  # {name, title, description, imageUrl, order}
    global_reach = Column(JSONType, nullable=True)  # {title, description, countries, registration}
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def section(self, name: str):
        value = getattr(self, ABOUT_SECTIONS[name])
        if value is None and name in LIST_SECTIONS:
            return []
        return value

    def to_dict(self):
        data = {name: self.section(name) for name in ABOUT_SECTIONS}
        data['id'] = self.id
        data['createdAt'] = self.created_at.isoformat() if self.created_at else None
        data['updatedAt'] = self.updated_at.isoformat() if self.updated_at else None
        return data
