"""
Search form variants and the session-backed form state.

The "full" form asks for a keyword and a price range; the "short" one is a
bare keyword box for page headers. Both post to the same search endpoint and
share their saved state.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional, Tuple

from app.libs.errors import ConfigurationError
from app.libs.filters import OPERATORS

FORM_STATE_KEY = "FormInfo.{form_name}.data"
SECTION_FIELDS = ("only_in_section", "section_id")


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    type: str = "text"


@dataclass(frozen=True)
class AdditionalField:
    """Extra form field filtering the candidates on `db_field` with `lookup`"""

    name: str
    label: str
    db_field: str
    lookup: str = "eq"
    type: str = "text"

    def __post_init__(self):
        if self.lookup not in OPERATORS:
            raise ConfigurationError(
                f"Unknown lookup '{self.lookup}' for search field '{self.name}'"
            )


@dataclass(frozen=True)
class SearchFormConfig:
    name: str = "ProductSearchForm"
    variant: str = "full"
    fields: Tuple[FormField, ...] = ()
    action_label: str = "Search"
    results_endpoint: str = "search.SearchResults"
    additional_fields: Tuple[AdditionalField, ...] = field(default_factory=tuple)

    def with_additional_field(self, additional: AdditionalField) -> "SearchFormConfig":
        kept = tuple(f for f in self.additional_fields if f.db_field != additional.db_field)
        return replace(self, additional_fields=kept + (additional,))

    @property
    def state_fields(self) -> Tuple[str, ...]:
        """Names of the submitted values kept between requests"""
        names = tuple(f.name for f in self.fields + self.additional_fields)
        return names + SECTION_FIELDS

    def describe(
        self,
        data: Optional[Mapping[str, Any]] = None,
        section_name: Optional[str] = None,
        section_size: int = 0,
    ) -> Dict[str, Any]:
        """Form layout with values restored from `data`"""
        data = data or {}
        fields_out = [
            {
                "name": f.name,
                "label": f.label,
                "type": f.type,
                "value": data.get(f.name),
            }
            for f in self.fields + self.additional_fields
        ]
        if section_size:
            fields_out.append(
                {
                    "name": "only_in_section",
                    "label": f"Only show results from {section_name} section",
                    "type": "checkbox",
                    "value": data.get("only_in_section", True),
                }
            )
        return {
            "name": self.name,
            "variant": self.variant,
            "action_label": self.action_label,
            "fields": fields_out,
        }


FULL_FORM = SearchFormConfig(
    variant="full",
    fields=(
        FormField("keyword", "Keywords"),
        FormField("min_price", "Minimum Price", "number"),
        FormField("max_price", "Maximum Price", "number"),
    ),
    action_label="Search",
)

SHORT_FORM = SearchFormConfig(
    variant="short",
    fields=(FormField("keyword", ""),),
    action_label="Go",
)

FORM_VARIANTS: Dict[str, SearchFormConfig] = {
    FULL_FORM.variant: FULL_FORM,
    SHORT_FORM.variant: SHORT_FORM,
}


def register_form_variant(config: SearchFormConfig) -> SearchFormConfig:
    FORM_VARIANTS[config.variant] = config
    return config


def get_form_config(variant: Optional[str] = None) -> SearchFormConfig:
    return FORM_VARIANTS.get(variant or FULL_FORM.variant, FULL_FORM)


class FormState:
    """Last submitted search form data, kept in a session-like mapping"""

    def __init__(self, store: MutableMapping, form_name: str) -> None:
        self.store = store
        self.key = FORM_STATE_KEY.format(form_name=form_name)

    def load(self) -> Dict[str, Any]:
        data = self.store.get(self.key)
        return dict(data) if isinstance(data, Mapping) else {}

    def save(
        self, data: Mapping[str, Any], fields: Optional[Iterable[str]] = None
    ) -> None:
        """Store `data` without empty values, limited to `fields` when given"""
        allowed = None if fields is None else set(fields)
        self.store[self.key] = {
            k: v
            for k, v in data.items()
            if v is not None and (allowed is None or k in allowed)
        }

    def clear(self) -> None:
        self.store.pop(self.key, None)
