"""
Turns a free-text search string into a structured query intent.
Parsing never raises: fragments that cannot be understood stay in the
keywords or are dropped.
"""
import enum
import re

from pydantic import BaseModel, ConfigDict

US_STATES = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "district of columbia": "DC", "florida": "FL", "georgia": "GA", "hawaii": "HI",
    "idaho": "ID", "illinois": "IL", "indiana": "IN", "iowa": "IA",
    "kansas": "KS", "kentucky": "KY", "louisiana": "LA", "maine": "ME",
    "maryland": "MD", "massachusetts": "MA", "michigan": "MI", "minnesota": "MN",
    "mississippi": "MS", "missouri": "MO", "montana": "MT", "nebraska": "NE",
    "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM",
    "new york": "NY", "north carolina": "NC", "north dakota": "ND", "ohio": "OH",
    "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI",
    "south carolina": "SC", "south dakota": "SD", "tennessee": "TN", "texas": "TX",
    "utah": "UT", "vermont": "VT", "virginia": "VA", "washington": "WA",
    "west virginia": "WV", "wisconsin": "WI", "wyoming": "WY",
}
STATE_CODES = set(US_STATES.values())

SCHEDULE_TYPE_CODES = {"full": 1, "part": 2}

# Matched in order; first hit wins.
OFFERING_TYPE_PATTERNS = [
    (r"\binternships?\b|\bintern\b", 15328),
    (r"\bintermittent\b", 15327),
    (r"\bsummer\b", 15326),
    (r"\bseasonal\b", 15322),
    (r"\bterm\b", 15319),
    (r"\btemporary\b|\btemp\b", 15318),
    (r"\bpermanent\b", 15317),
]

RATE_INTERVAL_PATTERNS = [
    (r"\bhourly\b|\bper hour\b", "PH"),
    (r"\bsalaried\b|\bper year\b|\bannual\b", "PA"),
]

_SCHEDULE_RE = re.compile(r"\b(full|part)[- ]?time\b")
_LOCATION_PREFIX_RE = re.compile(r"\b(?:in|near)\s+")
_JOB_NOUNS_RE = re.compile(
    r"\b(?:jobs?|positions?|openings?|postings?|vacanc(?:y|ies)|careers?|employment)\b"
)
# Keeps letters in any script and the symbols of tokens like "c++", "c#", ".net".
_DISALLOWED_RE = re.compile(r"[^\w\s,\-+#.]")


class OrganizationFormat(str, enum.Enum):
    TERM = "term"
    PREFIX = "prefix"


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str | None = None
    state: str | None = None


def _squish(text: str) -> str:
    return " ".join(text.split())


def resolve_state(text: str) -> str | None:
    """Map a US state name or two-letter code to its code."""
    value = _squish(text.strip(" ,-.")).lower()
    if value in US_STATES:
        return US_STATES[value]
    if value.upper() in STATE_CODES:
        return value.upper()
    return None


def parse_location(place: str) -> Location | None:
    place = _squish(place.strip(" ,-."))
    if not place:
        return None
    if "," in place:
        city, _, state_part = place.partition(",")
        city = city.strip(" -.") or None
        state = resolve_state(state_part)
        if city is None and state is None:
            return None
        return Location(city=city, state=state)
    state = resolve_state(place)
    if state:
        return Location(state=state)
    # A bare place that is not a state is too ambiguous to require.
    return None


def parse_organization(organization_id: str | None) -> tuple[str | None, OrganizationFormat]:
    if not organization_id or not organization_id.strip():
        return None, OrganizationFormat.TERM
    value = organization_id.strip().upper()
    if value.endswith("*"):
        value = value.rstrip("*").strip()
        return (value or None), OrganizationFormat.PREFIX
    # Two-letter codes name a whole department; match every sub-agency under it.
    if len(value) == 2:
        return value, OrganizationFormat.PREFIX
    return value, OrganizationFormat.TERM


class Query(BaseModel):
    model_config = ConfigDict(frozen=True)

    keywords: str | None = None
    organization_id: str | None = None
    organization_format: OrganizationFormat = OrganizationFormat.TERM
    location: Location | None = None
    position_offering_type_code: int | None = None
    position_schedule_type_code: int | None = None
    rate_interval_code: str | None = None

    @classmethod
    def parse(cls, query: str | None, organization_id: str | None = None) -> "Query":
        fields: dict = {}
        organization, organization_format = parse_organization(organization_id)
        fields["organization_id"] = organization
        fields["organization_format"] = organization_format

        text = _squish(_DISALLOWED_RE.sub(" ", (query or "").lower()))

        match = _SCHEDULE_RE.search(text)
        if match:
            fields["position_schedule_type_code"] = SCHEDULE_TYPE_CODES[match.group(1)]
            text = _SCHEDULE_RE.sub(" ", text)

        for pattern, code in RATE_INTERVAL_PATTERNS:
            if re.search(pattern, text):
                fields["rate_interval_code"] = code
                text = re.sub(pattern, " ", text)
                break

        for pattern, code in OFFERING_TYPE_PATTERNS:
            if re.search(pattern, text):
                fields["position_offering_type_code"] = code
                text = re.sub(pattern, " ", text)
                break

        text = _squish(text)
        # The last "in <place>" phrase runs to the end of the query.
        prefixes = list(_LOCATION_PREFIX_RE.finditer(text))
        if prefixes:
            last = prefixes[-1]
            place = text[last.end():]
            location = parse_location(place)
            if location is not None:
                fields["location"] = location
                text = text[: last.start()]
            else:
                # Unrecognized places stay searchable as keywords.
                text = f"{text[: last.start()]} {place}"

        text = _squish(_JOB_NOUNS_RE.sub(" ", text).replace(",", " "))
        fields["keywords"] = text.strip(" -") or None
        return cls(**fields)

    @property
    def valid(self) -> bool:
        return any([
            self.keywords,
            self.organization_id,
            self.location is not None,
            self.position_offering_type_code is not None,
            self.position_schedule_type_code is not None,
            self.rate_interval_code,
        ])

    @property
    def has_state(self) -> bool:
        return self.location is not None and bool(self.location.state)

    @property
    def has_city(self) -> bool:
        return self.location is not None and bool(self.location.city)
