from sqlalchemy import Column, Integer, String

from quoteday.core.db import Base
from quoteday.models.quote import JSONType


class SynonymGroup(Base):
    __tablename__ = "synonym_groups"

    id = Column(Integer, primary_key=True)
    group_name = Column(String(64), unique=True, nullable=False)
    terms = Column(JSONType, nullable=False, default=dict)  # {"en": [...], "de": [...]}

    def all_terms(self) -> list:
        return [t.lower() for terms in (self.terms or {}).values() for t in terms]
