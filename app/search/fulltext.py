from typing import Sequence

from sqlalchemy import and_, cast, func, literal, or_
from sqlalchemy.dialects.mysql import match as mysql_match
from sqlalchemy.dialects.postgresql import REGCONFIG

from app.libs.filters import escape_like


def full_text_clause(
    columns: Sequence,
    phrase: str,
    dialect_name: str,
    use_boolean: bool = True,
    text_config: str = "simple",
):
    """
    Build a full-text match of `phrase` over `columns` for the given dialect.

    PostgreSQL matches a tsvector of the concatenated columns, MySQL uses
    MATCH ... AGAINST (which needs a FULLTEXT index on those columns). Other
    databases get a plain "every word appears somewhere" ILIKE search.

    Boolean mode lets shoppers use quotes, OR and -exclusions.
    """
    if dialect_name == "postgresql":
        regconfig = cast(literal(text_config), REGCONFIG)
        document = func.to_tsvector(regconfig, func.concat_ws(" ", *columns))
        to_query = func.websearch_to_tsquery if use_boolean else func.plainto_tsquery
        return document.op("@@")(to_query(regconfig, phrase))

    if dialect_name in ("mysql", "mariadb"):
        clause = mysql_match(*columns, against=phrase)
        return clause.in_boolean_mode() if use_boolean else clause.in_natural_language_mode()

    words = [w for w in phrase.split(" ") if w]
    return and_(
        *[
            or_(*[c.ilike(f"%{escape_like(w)}%", escape="\\") for c in columns])
            for w in words
        ]
    )
