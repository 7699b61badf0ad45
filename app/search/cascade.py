"""
Tiered keyword search.

A search widens step by step until it finds something: the shop's item
code first, then the keyword phrase against product titles (exact, substring,
full-text), then the same tiers against category names. A tier with exactly
one hit is a direct match; bigger hits are collected into a capped result
list. When the keyword stages find nothing the caller gets the whole
(filtered) candidate list instead.

The evaluator only talks to an `ItemSource`, so it can run against the
database (see `sources.py`) or anything else that can answer the same
questions.
"""
# python imports
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

MAX_RESULTS = 100

_WHITESPACE = re.compile(r"\s+")


class MatchKind(Enum):
    PRODUCT = "product"
    CATEGORY = "category"


class SearchTier(IntEnum):
    """Phrase search tiers, most specific first"""

    EXACT = 0
    PARTIAL = 1
    FULL_TEXT = 2


@dataclass(frozen=True)
class SingleMatch:
    kind: MatchKind
    id: int


@dataclass
class ResultList:
    ids: List[int]
    # False when the list is the fallback candidate listing
    keyword_matched: bool = False


SearchOutcome = Union[SingleMatch, ResultList]


def normalize_keyword(keyword: Optional[str]) -> str:
    """Lowercase and collapse whitespace"""
    return _WHITESPACE.sub(" ", keyword or "").strip().lower()


def parse_code(keyword: str) -> Optional[int]:
    """Item code typed as plain ASCII digits, optionally negative"""
    if not keyword or not keyword.isascii() or not keyword.lstrip("-").isdigit():
        return None
    try:
        return int(keyword)
    except (TypeError, ValueError):
        return None


@dataclass
class SearchQuery:
    keyword: str = ""
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    only_in_section: bool = False
    # values for additional form fields, keyed by db field
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.keyword = normalize_keyword(self.keyword)

    @property
    def code(self) -> Optional[int]:
        return parse_code(self.keyword)

    @property
    def words(self) -> List[str]:
        return self.keyword.split(" ") if self.keyword else []

    @property
    def is_searchable(self) -> bool:
        return len(self.keyword) > 1


class ResultAccumulator:
    """
    Ordered, de-duplicated list of item ids that stops growing at `maximum`.

    `add` returns True once the list is full so callers can stop searching.
    """

    def __init__(self, maximum: int = MAX_RESULTS) -> None:
        if maximum < 1:
            raise ValueError("maximum must be at least 1")
        self.maximum = maximum
        self._ids: List[int] = []
        self._seen = set()

    @property
    def position(self) -> int:
        return len(self._ids)

    @property
    def full(self) -> bool:
        return len(self._ids) >= self.maximum

    @property
    def ids(self) -> List[int]:
        return list(self._ids)

    def add(self, ids: Iterable[int]) -> bool:
        for item_id in ids:
            if self.full:
                break
            if item_id in self._seen:
                continue
            self._seen.add(item_id)
            self._ids.append(item_id)
        return self.full

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, item_id) -> bool:
        return item_id in self._seen


def expand_phrases(
    keyword: str, synonyms: Optional[Callable[[str], Iterable[str]]] = None
) -> List[str]:
    """
    Build the list of phrases to search for a keyword.

    The keyword itself comes first. For every word that has replacements, the
    keyword is repeated with that word swapped for each replacement.

    Args:
        keyword: normalized keyword
        synonyms: callable returning the replacements for one word

    Returns:
        De-duplicated phrases, original phrase first
    """
    phrases = [keyword]
    if not keyword or synonyms is None:
        return phrases

    words = keyword.split(" ")
    for index, word in enumerate(words):
        for replacement in synonyms(word) or ():
            replacement = normalize_keyword(replacement)
            if not replacement or replacement == word:
                continue
            phrase = " ".join(words[:index] + [replacement] + words[index + 1 :])
            if phrase not in phrases:
                phrases.append(phrase)
    return phrases


class ItemSource(ABC):
    """What the cascade needs from the catalog.

    All id lists are returned in the source's listing order and hold at most
    `limit` entries.
    """

    @abstractmethod
    def count(self) -> int:
        """Number of candidates"""

    @abstractmethod
    def all_ids(self, limit: int) -> List[int]:
        """Candidate ids"""

    @abstractmethod
    def ids_by_code(self, code: int, limit: int) -> List[int]:
        """Candidates whose internal item code equals `code`"""

    @abstractmethod
    def ids_by_tier(self, tier: SearchTier, phrases: Sequence[str], limit: int) -> List[int]:
        """Candidates matching any phrase on any searched field"""

    @abstractmethod
    def category_ids_by_tier(
        self, tier: SearchTier, phrases: Sequence[str], limit: int
    ) -> List[int]:
        """Categories whose name matches any phrase"""

    @abstractmethod
    def member_ids(self, category_ids: Sequence[int], limit: int) -> List[int]:
        """Candidates belonging to any of the categories"""


@dataclass
class SearchContext:
    query: SearchQuery
    source: ItemSource
    accumulator: ResultAccumulator
    phrases: List[str]

    @property
    def fetch_limit(self) -> int:
        # enough to fill the accumulator even if every current id comes back,
        # and at least two so a single hit can be told apart
        return max(self.accumulator.maximum, 2)

    def take(self, ids: List[int], kind: MatchKind = MatchKind.PRODUCT) -> Optional[SingleMatch]:
        """Turn one tier's hits into a direct match or accumulate them"""
        if len(ids) == 1 and not len(self.accumulator):
            return SingleMatch(kind, ids[0])
        if ids:
            self.accumulator.add(ids)
        return None


Stage = Callable[[SearchContext], Optional[SingleMatch]]


def match_code(ctx: SearchContext) -> Optional[SingleMatch]:
    code = ctx.query.code
    if code is None:
        return None
    ids = ctx.source.ids_by_code(code, ctx.fetch_limit)
    logger.debug(f"Code {code} matched {len(ids)} items")
    return ctx.take(ids)


def match_phrase(ctx: SearchContext) -> Optional[SingleMatch]:
    for tier in SearchTier:
        ids = ctx.source.ids_by_tier(tier, ctx.phrases, ctx.fetch_limit)
        logger.debug(f"Phrase tier {tier.name} matched {len(ids)} items")
        match = ctx.take(ids)
        if match:
            return match
        if ctx.accumulator.full:
            break
    return None


def match_categories(ctx: SearchContext) -> Optional[SingleMatch]:
    if ctx.query.only_in_section:
        return None
    for tier in SearchTier:
        category_ids = ctx.source.category_ids_by_tier(
            tier, ctx.phrases, ctx.fetch_limit
        )
        logger.debug(f"Category tier {tier.name} matched {len(category_ids)} categories")
        if not category_ids:
            continue
        if len(category_ids) == 1 and not len(ctx.accumulator):
            return SingleMatch(MatchKind.CATEGORY, category_ids[0])

        match = ctx.take(ctx.source.member_ids(category_ids, ctx.fetch_limit))
        if match:
            return match
        if ctx.accumulator.full:
            break
    return None


DEFAULT_STAGES: Sequence[Stage] = (match_code, match_phrase, match_categories)


class CascadeEvaluator:
    """Runs the search stages in order until one of them produces results.

    Args:
        stages: ordered stage functions
        synonyms: callable returning replacement terms for a word
        history: callable recording a searched keyword; failures are logged
            and otherwise ignored
    """

    def __init__(
        self,
        stages: Sequence[Stage] = DEFAULT_STAGES,
        synonyms: Optional[Callable[[str], Iterable[str]]] = None,
        history: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.stages = list(stages)
        self.synonyms = synonyms
        self.history = history

    def evaluate(
        self, query: SearchQuery, source: ItemSource, max_results: int = MAX_RESULTS
    ) -> SearchOutcome:
        accumulator = ResultAccumulator(max_results)

        if query.is_searchable and source.count():
            self._record(query.keyword)
            ctx = SearchContext(
                query=query,
                source=source,
                accumulator=accumulator,
                phrases=expand_phrases(query.keyword, self.synonyms),
            )
            for stage in self.stages:
                match = stage(ctx)
                if match:
                    logger.info(
                        f"Keyword '{query.keyword}' matched {match.kind.value} {match.id}"
                    )
                    return match
                if len(accumulator):
                    break

        if len(accumulator):
            logger.info(f"Keyword '{query.keyword}' matched {len(accumulator)} items")
            return ResultList(accumulator.ids, keyword_matched=True)

        accumulator.add(source.all_ids(max_results))
        return ResultList(accumulator.ids, keyword_matched=False)

    def _record(self, keyword: str) -> None:
        if self.history is None:
            return
        try:
            self.history(keyword)
        except Exception as e:
            logger.warning(f"Failed to record search '{keyword}': {str(e)}")
