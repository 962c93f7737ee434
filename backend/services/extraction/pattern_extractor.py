"""Industry-keyed regex rules: the high-confidence extraction signal.

Rules run against normalized text (see text_normalizer), so they spell
"nodejs", "cplusplus" and "csharp" instead of the punctuated forms. The first
capture group of every rule is the skill itself; trailing words such as
"programming" or a version number only widen the matched span.
"""

import logging
import re

from models.schemas.knowledge import Industry
from models.schemas.skill_match import MatchType, SkillLevel, SkillMatch
from services.extraction.ontology import SkillOntology
from services.extraction.text_normalizer import normalized_key

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.8
BASE_WEIGHT = 0.9
LEVEL_WINDOW = 30
PHRASE_WINDOW = 20

# (category, pattern) per industry
TECHNOLOGY_RULES: tuple[tuple[str, str], ...] = (
    ("programming_language",
     r"\b(python|javascript|typescript|java|cplusplus|csharp|rust|golang|kotlin|swift|scala|ruby|php|perl|matlab)\b"
     r"(?:\s*(?:programming|development|coding))?"),
    ("web_framework",
     r"\b(react|angular|vue|svelte|nextjs|nuxtjs|express|fastify)(?:js)?\b(?:\s*v?\d+(?:\.\d+)*)?"),
    ("backend_framework",
     r"\b(django|flask|spring(?:\s*boot)?|laravel|rails|aspnet|nodejs|deno|fastapi)\b"),
    ("database",
     r"\b(postgresql|mysql|mongodb|redis|elasticsearch|cassandra|dynamodb|firestore|sqlite|oracle|sql\s*server)\b"
     r"(?:\s*(?:database|db))?"),
    ("cloud_platform",
     r"\b(aws|amazon\s*web\s*services|azure|google\s*cloud(?:\s*platform)?|gcp|digital\s*ocean|heroku|vercel|netlify)\b"),
    ("devops_tool",
     r"\b(docker|kubernetes|k8s|jenkins|gitlab\s*ci|github\s*actions|terraform|ansible|chef|puppet|vagrant)\b"),
    ("machine_learning",
     r"\b(tensorflow|pytorch|scikit-learn|pandas|numpy|jupyter|machine\s*learning|deep\s*learning"
     r"|neural\s*networks|nlp|computer\s*vision)\b"),
    ("mobile",
     r"\b(react\s*native|flutter|ionic|xamarin|android|ios|mobile\s*development)\b"),
)

HEALTHCARE_RULES: tuple[tuple[str, str], ...] = (
    ("ehr_system",
     r"\b(epic|cerner|meditech|allscripts|athenahealth|emr|ehr|electronic\s*(?:medical|health)\s*records?)\b"),
    ("regulatory",
     r"\b(hipaa|hitech|fda|clinical\s*trials?|medical\s*devices?|pharmaceutical|biotech)\b"),
    ("clinical_specialty",
     r"\b(radiology|cardiology|oncology|dermatology|pathology|anesthesiology|surgery)\b"),
    ("medical_coding",
     r"\b(icd-?\d+|cpt|medical\s*coding|medical\s*billing|healthcare\s*analytics)\b"),
)

FINANCE_RULES: tuple[tuple[str, str], ...] = (
    ("financial_tool",
     r"\b(bloomberg|reuters|factset|morningstar|risk\s*management|portfolio\s*management)\b"),
    ("financial_analysis",
     r"\b(financial\s*modeling|valuation|dcf|discounted\s*cash\s*flow|capm|var|value\s*at\s*risk)\b"),
    ("financial_sector",
     r"\b(trading|investment\s*banking|asset\s*management|hedge\s*funds?|private\s*equity)\b"),
    ("financial_credential",
     r"\b(cfa|frm|cpa|financial\s*planning|wealth\s*management|compliance)\b"),
    ("financial_instrument",
     r"\b(forex|derivatives|fixed\s*income|equity|bonds|securities|commodities)\b"),
)

BUSINESS_RULES: tuple[tuple[str, str], ...] = (
    ("methodology",
     r"\b(project\s*management|agile|scrum|kanban|waterfall|lean|six\s*sigma)\b"),
    ("business_analysis",
     r"\b(business\s*analysis|process\s*improvement|change\s*management|stakeholder\s*management)\b"),
    ("business_tool",
     r"\b(salesforce|hubspot|marketo|tableau|power\s*bi|excel|google\s*analytics)\b"),
    ("marketing",
     r"\b(digital\s*marketing|seo|sem|social\s*media|content\s*marketing|email\s*marketing)\b"),
)

SKILL_RULES: dict[Industry, tuple[tuple[str, str], ...]] = {
    Industry.TECHNOLOGY: TECHNOLOGY_RULES,
    Industry.DATA_SCIENCE: TECHNOLOGY_RULES,
    Industry.HEALTHCARE: HEALTHCARE_RULES,
    Industry.FINANCE: FINANCE_RULES,
    Industry.BUSINESS: BUSINESS_RULES,
    Industry.PROJECT_MANAGEMENT: BUSINESS_RULES,
}

_TECH_CERTS = (
    r"\b(aws\s*certified|azure\s*certified|gcp\s*certified|cissp|cism|ceh|comptia|oracle\s*certified"
    r"|microsoft\s*certified|cisco\s*certified|kubernetes\s*certified|ckad|cka)\b"
)
_PM_CERTS = (
    r"\b(pmp|prince2|scrum\s*master|safe\s*(?:agilist|certified|practitioner)|agile\s*certified|csm|psm)\b"
)

CERTIFICATION_RULES: dict[Industry, str] = {
    Industry.TECHNOLOGY: _TECH_CERTS,
    Industry.DATA_SCIENCE: _TECH_CERTS,
    Industry.PROJECT_MANAGEMENT: _PM_CERTS,
    Industry.BUSINESS: _PM_CERTS,
    Industry.FINANCE: r"\b(cfa|frm|cpa|series\s*\d+|chartered\s*financial\s*analyst)\b",
}

EXPERIENCE_PATTERNS: tuple[str, ...] = (
    r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s*)?(?:experience|exp)(?:\s*(?:in|with|using))?\s*([^.;]+)",
    r"(\d+)\+?\s*(?:years?|yrs?)\s*([^.;,]+?)(?:experience|exp)",
)

TECHNICAL_INDICATORS: tuple[str, ...] = (
    "experience", "years", "proficient", "expert", "skilled", "knowledge", "using", "with",
)

# First hit wins, checked top to bottom
SKILL_LEVEL_WORDS: tuple[tuple[tuple[str, ...], SkillLevel], ...] = (
    (("expert", "advanced"), SkillLevel.EXPERT),
    (("senior", "lead"), SkillLevel.ADVANCED),
    (("intermediate", "proficient"), SkillLevel.INTERMEDIATE),
    (("beginner", "basic"), SkillLevel.BEGINNER),
)


class PatternConfigError(ValueError):
    """Raised when a static extraction rule does not compile."""


def _compile(pattern: str) -> re.Pattern:
    try:
        compiled = re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise PatternConfigError(f"Invalid extraction pattern {pattern!r}: {e}") from e
    if compiled.groups < 1:
        raise PatternConfigError(f"Extraction pattern needs a capture group: {pattern!r}")
    return compiled


class PatternRuleSet:
    """Compiled rule tables. Built once; read-only afterwards."""

    def __init__(
        self,
        skill_rules: dict[Industry, tuple[tuple[str, str], ...]] | None = None,
        certification_rules: dict[Industry, str] | None = None,
        experience_patterns: tuple[str, ...] | None = None,
    ) -> None:
        skill_rules = SKILL_RULES if skill_rules is None else skill_rules
        certification_rules = CERTIFICATION_RULES if certification_rules is None else certification_rules
        experience_patterns = EXPERIENCE_PATTERNS if experience_patterns is None else experience_patterns

        self._skill_rules = {
            industry: tuple((category, _compile(p)) for category, p in rules)
            for industry, rules in skill_rules.items()
        }
        self._certification_rules = {
            industry: _compile(p) for industry, p in certification_rules.items()
        }
        self.experience_patterns = tuple(_compile(p) for p in experience_patterns)
        logger.info(
            "Compiled extraction rules for %d industries (%d certification tables)",
            len(self._skill_rules), len(self._certification_rules),
        )

    def rules_for(self, industry: Industry) -> tuple[tuple[str, re.Pattern], ...]:
        return self._skill_rules.get(industry, ())

    def certifications_for(self, industry: Industry) -> re.Pattern | None:
        return self._certification_rules.get(industry)


class PatternExtractor:
    def __init__(self, rules: PatternRuleSet | None = None, context_window: int = 50) -> None:
        if context_window <= 0:
            raise ValueError("context_window must be positive")
        self.rules = rules or PatternRuleSet()
        self.context_window = context_window

    def extract(self, text: str, industry: Industry, ontology: SkillOntology) -> list[SkillMatch]:
        """Run the industry's rules over normalized text.

        Returns one match per normalized form (first rule, then first
        position wins). Unknown industries have no rules and yield [].
        """
        if not text:
            return []

        matches: list[SkillMatch] = []
        seen: set[str] = set()

        rules = list(self.rules.rules_for(industry))
        certifications = self.rules.certifications_for(industry)
        if certifications is not None:
            rules.append(("certification", certifications))

        for category, pattern in rules:
            match_type = MatchType.CERTIFICATION if category == "certification" else MatchType.EXACT
            for mat in pattern.finditer(text):
                keyword = re.sub(r"\s+", " ", mat.group(1).strip())
                key = normalized_key(keyword)
                if not key or key in seen:
                    continue
                seen.add(key)
                matches.append(self._build_match(
                    text, mat, keyword, key, category, match_type, industry, ontology,
                ))

        logger.debug("Pattern extraction found %d skills for %s", len(matches), industry.value)
        return matches

    def _build_match(
        self,
        text: str,
        mat: re.Match,
        keyword: str,
        key: str,
        category: str,
        match_type: MatchType,
        industry: Industry,
        ontology: SkillOntology,
    ) -> SkillMatch:
        start, end = mat.start(1), mat.end()
        return SkillMatch(
            keyword=keyword,
            normalized_form=key,
            category=category,
            confidence_score=BASE_CONFIDENCE,
            context_relevance=self.context_relevance(text, start, end),
            weight=BASE_WEIGHT,
            skill_level=self.skill_level(text, start),
            experience_years=self.experience_years(text, start),
            match_type=match_type,
            context_phrases=context_phrases(text, start, end),
            semantic_variations=list(ontology.synonyms_of(key)),
            industry_relevance=ontology.industry_relevance(key, industry),
            word_position=start,
        )

    def context_relevance(self, text: str, start: int, end: int) -> float:
        """0.5 plus 0.1 per technical indicator near the match, capped at 0.9."""
        window = text[max(0, start - self.context_window):end + self.context_window]
        hits = sum(1 for indicator in TECHNICAL_INDICATORS if indicator in window)
        return 0.5 + min(hits * 0.1, 0.4)

    def skill_level(self, text: str, position: int) -> SkillLevel:
        window = text[max(0, position - LEVEL_WINDOW):position + LEVEL_WINDOW].lower()
        for words, level in SKILL_LEVEL_WORDS:
            if any(w in window for w in words):
                return level
        return SkillLevel.UNKNOWN

    def experience_years(self, text: str, position: int) -> int | None:
        window = text[max(0, position - self.context_window):position + self.context_window]
        for pattern in self.rules.experience_patterns:
            found = pattern.search(window)
            if found and found.group(1).isdigit():
                return int(found.group(1))
        return None


def context_phrases(text: str, start: int, end: int) -> list[str]:
    """Up to two sentence fragments around a match."""
    window = text[max(0, start - PHRASE_WINDOW):end + PHRASE_WINDOW]
    phrases = [p.strip() for p in re.split(r"[.;\n]", window)]
    return [p for p in phrases if len(p) > 5][:2]
