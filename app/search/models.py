import re

from sqlalchemy import event

from external.database import db
from app.libs.models import BaseModel


class SearchReplacement(BaseModel):
    """
    Synonym for one or more search terms.

    `search` holds a comma separated list of terms (e.g. "tee,t-shirt"); any
    query word equal to one of them is also searched as `replace`.
    """
    __tablename__ = "search_replacements"

    id = db.Column(db.Integer, primary_key=True)
    search = db.Column(db.String(255), nullable=False)
    replace = db.Column(db.String(255), nullable=False)

    @property
    def terms(self):
        return [t.strip().lower() for t in (self.search or "").split(",") if t.strip()]

    def __repr__(self):
        return f"<SearchReplacement {self.search} -> {self.replace}>"


class SearchHistory(BaseModel):
    """One recorded search keyword"""
    __tablename__ = "search_history"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)

    @staticmethod
    def clean_title(value):
        return re.sub(r" +", " ", value or "").strip()[:255]

    def __repr__(self):
        return f"<SearchHistory {self.title}>"


@event.listens_for(SearchHistory, "before_insert")
@event.listens_for(SearchHistory, "before_update")
def _clean_search_history_title(mapper, connection, target):
    target.title = SearchHistory.clean_title(target.title)
