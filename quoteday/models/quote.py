import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum as SAEnum, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import validates

from quoteday.core.db import Base

JSONType = JSON().with_variant(JSONB, "postgresql")

# Fields every translated variant must carry together
TRANSLATABLE_FIELDS = ("text", "context", "explanation", "situations", "tags")


class QuoteCategory(str, enum.Enum):
    SCRIPTURE = "scripture"
    QUOTE = "quote"
    SAYING = "saying"
    POEM = "poem"

    @classmethod
    def parse(cls, value):
        """Map provider labels ("bible", "Quote") onto a category; unknown labels become QUOTE."""
        label = (value or "").strip().lower()
        if label in ("bible", "verse", "scripture"):
            return cls.SCRIPTURE
        try:
            return cls(label)
        except ValueError:
            return cls.QUOTE


# Order used when picking one representative per category
CATEGORY_ORDER = (QuoteCategory.SCRIPTURE, QuoteCategory.QUOTE, QuoteCategory.SAYING, QuoteCategory.POEM)


class QuoteProvenance(str, enum.Enum):
    STATIC = "static"
    GENERATED = "generated"


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True)
    text = Column(Text, nullable=False)
    author = Column(String(255), nullable=True)
    reference = Column(String(255), nullable=True)
    category = Column(SAEnum(QuoteCategory, name="quote_category", values_callable=lambda e: [m.value for m in e]),
                      nullable=False, default=QuoteCategory.QUOTE)
    language = Column(String(8), nullable=False, index=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    context = Column(Text, nullable=False, default="")
    explanation = Column(Text, nullable=False, default="")
    situations = Column(JSONType, nullable=False, default=list)
    tags = Column(JSONType, nullable=False, default=list)
    translations = Column(JSONType, nullable=False, default=dict)  # {"de": {"text": ..., "context": ..., ...}}
    provenance = Column(SAEnum(QuoteProvenance, name="quote_provenance", values_callable=lambda e: [m.value for m in e]),
                        nullable=False, default=QuoteProvenance.STATIC)
    generation_prompt = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @validates("text")
    def _validate_text(self, key, value):
        if not value or not value.strip():
            raise ValueError("quote text must not be empty")
        return value

    @validates("translations")
    def _validate_translations(self, key, value):
        for language, variant in (value or {}).items():
            if not isinstance(variant, dict):
                raise ValueError(f"translation '{language}' must be a mapping")
            missing = [f for f in TRANSLATABLE_FIELDS if variant.get(f) in (None, "")]
            if missing:
                raise ValueError(f"translation '{language}' is missing {', '.join(missing)}")
        return value

    def base_variant(self) -> dict:
        return {
            "text": self.text,
            "context": self.context,
            "explanation": self.explanation,
            "situations": list(self.situations or []),
            "tags": list(self.tags or []),
            "reference": self.reference,
        }

    def variant(self, language: str) -> dict:
        """Fields in ``language``, or the origin-language fields when no translation exists."""
        if language != self.language and language in (self.translations or {}):
            merged = self.base_variant()
            merged.update(self.translations[language])
            return merged
        return self.base_variant()

    def searchable_fields(self) -> list:
        """Lowercased text of every searchable field across all language variants."""
        fields = [self.author, self.reference]
        variants = [self.base_variant()] + list((self.translations or {}).values())
        for v in variants:
            fields.extend([v.get("text"), v.get("context"), v.get("explanation"), v.get("reference")])
            fields.extend(v.get("situations") or [])
            fields.extend(v.get("tags") or [])
        return [str(f).lower() for f in fields if f]

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Quote id={self.id} language={self.language} category={self.category}>"
