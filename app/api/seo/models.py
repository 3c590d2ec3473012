from sqlalchemy import Column, DateTime, Integer, String

from app.core.database import Base
from app.core.utils import current_time, join_list, split_list


class SEOTemplate(Base):
    __tablename__ = 'seo_templates'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    meta_title = Column(String, nullable=False)
    meta_description = Column(String, nullable=False)
    _meta_keywords = Column('meta_keywords', String)
    _focus_keywords = Column('focus_keywords', String)
    slug = Column(String, unique=True, index=True, nullable=False)
    template_type = Column(String, index=True, nullable=False)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    @property
    def meta_keywords(self) -> list[str]:
        return split_list(self._meta_keywords)

    @meta_keywords.setter
    def meta_keywords(self, value) -> None:
        self._meta_keywords = join_list(value)

    @property
    def focus_keywords(self) -> list[str]:
        return split_list(self._focus_keywords)

    @focus_keywords.setter
    def focus_keywords(self, value) -> None:
        self._focus_keywords = join_list(value)
