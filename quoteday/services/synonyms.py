"""Query tokenization and synonym-group expansion for the second search tier."""
import re
from typing import Iterable, List, Set

from sqlalchemy import select

from quoteday.models.synonym_group import SynonymGroup

_PUNCTUATION = re.compile(r"[^\w\s]", re.UNICODE)
_WHITESPACE = re.compile(r"\s+")
MIN_TOKEN_LENGTH = 3


def normalize_query(query: str) -> str:
    """Lowercase and collapse whitespace."""
    return _WHITESPACE.sub(" ", (query or "").strip().lower())


def extract_keywords(query: str) -> List[str]:
    """Punctuation-free tokens longer than two characters, in query order."""
    cleaned = _PUNCTUATION.sub(" ", normalize_query(query))
    tokens = []
    for token in cleaned.split():
        if len(token) >= MIN_TOKEN_LENGTH and token not in tokens:
            tokens.append(token)
    return tokens


def terms_overlap(token: str, term: str) -> bool:
    """True when either term contains the other."""
    return token in term or term in token


def expand_terms(keywords: Iterable[str], groups: Iterable[SynonymGroup]) -> Set[str]:
    """Union of names and terms of every group that shares a keyword.

    A group matches when a keyword and one of its terms (any language) or its
    name contain one another.
    """
    keywords = list(keywords)
    expanded: Set[str] = set()
    for group in groups:
        name = group.group_name.lower()
        candidates = [name, name.replace("_", " ")] + group.all_terms()
        if any(terms_overlap(k, c) for k in keywords for c in candidates):
            expanded.add(name)
            expanded.update(group.all_terms())
    return expanded


def load_groups(session) -> List[SynonymGroup]:
    return list(session.execute(select(SynonymGroup).order_by(SynonymGroup.id)).scalars())


DEFAULT_SYNONYM_GROUPS = [
    ("heartbreak",
     ["heartbreak", "breakup", "heartache", "separation", "letting go", "goodbye", "abandoned", "broken heart"],
     ["liebeskummer", "herzschmerz", "trennung", "beziehungsende", "loslassen", "abschied", "verlassen", "gebrochenes herz"]),
    ("stress",
     ["stress", "overwhelmed", "burnout", "exhausted", "pressure", "overworked", "tension", "burden"],
     ["stress", "überfordert", "burnout", "erschöpft", "druck", "überlastet", "anspannung", "belastung"]),
    ("grief",
     ["grief", "loss", "death", "farewell", "missing", "bereavement", "funeral", "sorrow"],
     ["trauer", "verlust", "tod", "abschied", "vermissen", "trauerfall", "beerdigung", "schmerz"]),
    ("fear",
     ["fear", "worry", "anxiety", "panic", "uncertainty", "anxious", "worried", "apprehensive"],
     ["angst", "sorgen", "furcht", "panik", "unsicherheit", "ängstlich", "besorgt", "bange"]),
    ("motivation",
     ["motivation", "drive", "perseverance", "goals", "dreams", "success", "starting", "keep going", "never give up"],
     ["motivation", "antrieb", "durchhalten", "ziele", "träume", "erfolg", "anfangen", "weitermachen", "nicht aufgeben"]),
    ("conflict",
     ["argument", "conflict", "anger", "frustration", "forgiveness", "forgive", "dispute", "disagreement"],
     ["streit", "konflikt", "wut", "ärger", "vergebung", "verzeihen", "auseinandersetzung", "meinungsverschiedenheit"]),
    ("law",
     ["revenge", "retribution", "vengeance", "justice", "injustice", "fairness"],
     ["rache", "vergeltung", "gerechtigkeit", "ungerechtigkeit", "fairness"]),
    ("self_doubt",
     ["self doubt", "insecure", "inferior", "not good enough", "failure", "fear of failure", "self worth"],
     ["selbstzweifel", "unsicher", "minderwertig", "nicht gut genug", "versagen", "versagensangst", "selbstwert"]),
    ("loneliness",
     ["loneliness", "alone", "lonely", "isolated", "abandoned", "nobody", "solitude"],
     ["einsamkeit", "allein", "einsam", "isoliert", "verlassen", "niemand", "alleine"]),
    ("hope",
     ["hope", "confidence", "optimism", "getting better", "light", "new beginning", "faith"],
     ["hoffnung", "zuversicht", "optimismus", "besser werden", "licht", "neuanfang", "glaube"]),
    ("gratitude",
     ["gratitude", "grateful", "appreciation", "recognition", "contentment"],
     ["dankbarkeit", "dankbar", "wertschätzung", "anerkennung", "zufriedenheit"]),
    ("family",
     ["family", "parents", "children", "siblings", "mother", "father", "son", "daughter", "relatives"],
     ["familie", "eltern", "kinder", "geschwister", "mutter", "vater", "sohn", "tochter", "verwandte"]),
    ("work",
     ["work", "career", "job", "profession", "boss", "colleagues", "office", "fired", "unemployed"],
     ["arbeit", "beruf", "job", "karriere", "chef", "kollegen", "büro", "kündigung", "arbeitslos"]),
    ("health",
     ["health", "illness", "healing", "recovery", "pain", "doctor", "hospital"],
     ["gesundheit", "krankheit", "heilung", "genesung", "schmerzen", "arzt", "krankenhaus"]),
    ("change",
     ["change", "transition", "transformation", "new beginning", "different", "new", "evolution"],
     ["veränderung", "wandel", "umbruch", "neuanfang", "anders", "neu", "transformation"]),
    ("patience",
     ["patience", "waiting", "time", "endure", "persevere", "forbearance"],
     ["geduld", "warten", "zeit", "aushalten", "durchhalten", "langmut"]),
]
