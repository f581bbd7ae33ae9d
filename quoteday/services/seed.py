"""Idempotent seeding of the static corpus and the synonym groups."""
import logging

from quoteday.core.store import insert_if_absent
from quoteday.models.quote import Quote, QuoteCategory, QuoteProvenance
from quoteday.models.synonym_group import SynonymGroup
from quoteday.services.synonyms import DEFAULT_SYNONYM_GROUPS

logger = logging.getLogger(__name__)

STATIC_QUOTES = [
    {
        "text": "An eye for an eye, a tooth for a tooth.",
        "reference": "Exodus 21:24",
        "category": QuoteCategory.SCRIPTURE,
        "context": "This verse appears in the Law of Moses, in a section about personal injuries.",
        "explanation": "Contrary to popular belief, this verse was not encouraging revenge but limiting it.",
        "situations": ["facing injustice", "dealing with revenge", "legal matters"],
        "tags": ["justice", "law", "retribution"],
        "translations": {
            "de": {
                "text": "Auge um Auge, Zahn um Zahn.",
                "context": "Dieser Vers erscheint im Kontext des Gesetzes des Mose.",
                "explanation": "Entgegen der landläufigen Meinung ermutigte dieser Vers nicht zur Rache, sondern begrenzte sie.",
                "situations": ["Ungerechtigkeit erleben", "mit Rache umgehen"],
                "tags": ["Gerechtigkeit", "Gesetz"],
            }
        },
    },
    {
        "text": "Love your neighbor as yourself.",
        "reference": "Leviticus 19:18",
        "category": QuoteCategory.SCRIPTURE,
        "context": "Part of the Holiness Code in Leviticus, this commandment asks us to treat others with the care we give ourselves.",
        "explanation": "One of the most quoted verses in Jewish and Christian traditions and the basis of the Golden Rule.",
        "situations": ["building relationships", "community living", "resolving conflicts"],
        "tags": ["love", "community", "compassion"],
        "translations": {
            "de": {
                "text": "Liebe deinen Nächsten wie dich selbst.",
                "context": "Teil des Heiligkeitsgesetzes im Levitikus.",
                "explanation": "Einer der am häufigsten zitierten Verse in jüdischen und christlichen Traditionen.",
                "situations": ["Beziehungen aufbauen", "Gemeinschaftsleben"],
                "tags": ["Liebe", "Gemeinschaft", "Mitgefühl"],
            }
        },
    },
    {
        "text": "Trust in the Lord with all your heart.",
        "reference": "Proverbs 3:5",
        "category": QuoteCategory.SCRIPTURE,
        "context": "From the Book of Proverbs, this verse encourages complete reliance on God rather than on human understanding.",
        "explanation": "A call to trust even when a situation makes no sense from a human perspective.",
        "situations": ["facing uncertainty", "making difficult decisions", "dealing with fear"],
        "tags": ["faith", "trust", "wisdom"],
        "translations": {
            "de": {
                "text": "Vertraue auf den Herrn von ganzem Herzen.",
                "context": "Aus dem Buch der Sprüche ermutigt dieser Vers zum vollständigen Vertrauen auf Gott.",
                "explanation": "Dieser Vers ruft zu vollkommenem Vertrauen in Gottes Weisheit auf.",
                "situations": ["Unsicherheit begegnen", "schwierige Entscheidungen treffen"],
                "tags": ["Glaube", "Vertrauen", "Weisheit"],
            }
        },
    },
    {
        "text": "The truth will set you free.",
        "reference": "John 8:32",
        "category": QuoteCategory.SCRIPTURE,
        "context": "Jesus spoke these words to believers, explaining that knowing the truth brings spiritual freedom.",
        "explanation": "Often quoted out of context, the verse speaks about liberation from falsehood.",
        "situations": ["seeking authenticity", "breaking free from deception", "personal growth"],
        "tags": ["truth", "freedom", "authenticity"],
        "translations": {
            "de": {
                "text": "Die Wahrheit wird euch frei machen.",
                "context": "Jesus sprach diese Worte zu Gläubigen über spirituelle Freiheit.",
                "explanation": "Dieser Vers spricht über Befreiung von Falschheit.",
                "situations": ["Authentizität suchen", "sich von Täuschung befreien"],
                "tags": ["Wahrheit", "Freiheit", "Authentizität"],
            }
        },
    },
    {
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "category": QuoteCategory.QUOTE,
        "context": "From a commencement address at Stanford University in 2005.",
        "explanation": "Lasting effort comes more easily when the work itself matters to you.",
        "situations": ["choosing a career", "losing motivation at work"],
        "tags": ["work", "passion", "motivation"],
        "translations": {
            "de": {
                "text": "Der einzige Weg, großartige Arbeit zu leisten, ist zu lieben, was man tut.",
                "context": "Aus einer Abschlussrede an der Stanford University im Jahr 2005.",
                "explanation": "Ausdauer fällt leichter, wenn einem die Arbeit selbst etwas bedeutet.",
                "situations": ["Berufswahl", "Motivation bei der Arbeit verlieren"],
                "tags": ["Arbeit", "Leidenschaft", "Motivation"],
            }
        },
    },
    {
        "text": "Rome was not built in a day.",
        "category": QuoteCategory.SAYING,
        "context": "A medieval proverb recorded in French and English collections since the twelfth century.",
        "explanation": "Great things take time; impatience with slow progress is misplaced.",
        "situations": ["slow progress", "learning a new skill"],
        "tags": ["patience", "perseverance"],
        "translations": {
            "de": {
                "text": "Rom wurde nicht an einem Tag erbaut.",
                "context": "Ein mittelalterliches Sprichwort, seit dem zwölften Jahrhundert überliefert.",
                "explanation": "Große Dinge brauchen Zeit; Ungeduld mit langsamen Fortschritten ist fehl am Platz.",
                "situations": ["langsamer Fortschritt", "etwas Neues lernen"],
                "tags": ["Geduld", "Ausdauer"],
            }
        },
    },
    {
        "text": "Hope is the thing with feathers that perches in the soul.",
        "author": "Emily Dickinson",
        "category": QuoteCategory.POEM,
        "context": "The opening line of a poem written around 1861.",
        "explanation": "Hope is pictured as a small bird that keeps singing through every storm without asking anything in return.",
        "situations": ["difficult times", "waiting for change"],
        "tags": ["hope", "resilience"],
        "translations": {
            "de": {
                "text": "Hoffnung ist das Ding mit Federn, das in der Seele sitzt.",
                "context": "Die erste Zeile eines Gedichts von etwa 1861.",
                "explanation": "Die Hoffnung erscheint als kleiner Vogel, der in jedem Sturm weitersingt.",
                "situations": ["schwere Zeiten", "auf Veränderung warten"],
                "tags": ["Hoffnung", "Widerstandskraft"],
            }
        },
    },
    {
        "text": "Wer nicht wagt, der nicht gewinnt.",
        "language": "de",
        "category": QuoteCategory.SAYING,
        "context": "Ein altes deutsches Sprichwort.",
        "explanation": "Wer nie ein Risiko eingeht, kann auch nichts erreichen.",
        "situations": ["vor einer Entscheidung stehen", "Angst vor dem Scheitern"],
        "tags": ["Mut", "Risiko"],
        "translations": {
            "en": {
                "text": "Nothing ventured, nothing gained.",
                "context": "An old German proverb.",
                "explanation": "If you never take a risk, you cannot achieve anything.",
                "situations": ["facing a decision", "fear of failure"],
                "tags": ["courage", "risk"],
            }
        },
    },
]


def seed_quotes(session) -> int:
    """Insert static quotes that are not stored yet. Returns how many were added."""
    added = 0
    for entry in STATIC_QUOTES:
        data = dict(entry)
        text = data.pop("text")
        data.setdefault("language", "en")
        data.setdefault("provenance", QuoteProvenance.STATIC)
        _, created = insert_if_absent(session, Quote, {"text": text}, data)
        added += int(created)
    return added


def seed_synonym_groups(session) -> int:
    added = 0
    for name, terms_en, terms_de in DEFAULT_SYNONYM_GROUPS:
        _, created = insert_if_absent(
            session, SynonymGroup, {"group_name": name}, {"terms": {"en": terms_en, "de": terms_de}}
        )
        added += int(created)
    return added


def seed_all(session_factory) -> dict:
    with session_factory() as session:
        counts = {"quotes": seed_quotes(session), "synonym_groups": seed_synonym_groups(session)}
    logger.info("Seed complete", extra=counts)
    return counts
