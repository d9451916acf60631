"""Profession and place vocabularies.

Maps free-text fragments ("Fermière", "Brittany", "72") to canonical labels.
Matching ignores case, accents, periods, apostrophes, hyphens and spacing.
Caller-supplied entries take precedence over the built-in tables.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from kingraph.config import VocabularyEntry
from kingraph.utils.normalize import strip_diacritics

PROFESSION_SEPARATORS = re.compile(r"[;,/]")
PLACE_SEPARATORS = re.compile(r"[;,]")


def normalize_token(value: str) -> str:
    """Lowercase, strip accents and punctuation, collapse spaces."""
    token = strip_diacritics(value.lower())
    token = re.sub(r"[.'’]", "", token)
    token = re.sub(r"[-/]", " ", token)
    return " ".join(token.split())


def _entry(label: str, *aliases: str, category: str | None = None) -> VocabularyEntry:
    return VocabularyEntry(label=label, aliases=list(aliases), category=category)


TEMPLATE_PROFESSIONS: tuple[VocabularyEntry, ...] = (
    _entry("Agriculteur", "Agricultrice", "Fermier", "Fermière", "Cultivateur", "Cultivatrice"),
    _entry("Artisan", "Artisane", "Maître artisan", "Maîtresse artisane"),
    _entry("Boulanger", "Boulangère", "Pâtissier", "Pâtissière"),
    _entry("Charpentier", "Charpentière", "Menuisier", "Menuisière"),
    _entry(
        "Instituteur",
        "Institutrice", "Enseignant", "Enseignante", "Maître d'école", "Maîtresse d'école",
    ),
    _entry("Marchand", "Marchande", "Commerçant", "Commerçante"),
    _entry(
        "Médecin",
        "Docteur", "Docteure", "Médecin de campagne", "Chirurgien", "Chirurgienne",
    ),
    _entry("Notaire", "Clerc de notaire", "Officier public"),
    _entry("Ouvrier", "Ouvrière", "Manœuvre", "Travailleur", "Travailleuse"),
    _entry("Tailleur", "Tailleur d'habits", "Tailleur de pierre", "Couturier", "Couturière"),
)


_COUNTRIES = (
    _entry("France", "République française", "French Republic", "FR", "FRA", category="country"),
    _entry("Belgique", "Belgium", "Royaume de Belgique", "BE", category="country"),
    _entry("Suisse", "Switzerland", "Confédération suisse", "CH", category="country"),
    _entry("Allemagne", "Germany", "DE", "Bundesrepublik Deutschland", category="country"),
    _entry("Italie", "Italy", "IT", "Repubblica Italiana", category="country"),
    _entry("Espagne", "Spain", "ES", "Reino de España", category="country"),
    _entry("Luxembourg", "Grand-Duché de Luxembourg", "LU", category="country"),
    _entry(
        "Royaume-Uni",
        "United Kingdom", "UK", "Grande-Bretagne", "Great Britain", "Angleterre", "England",
        category="country",
    ),
    _entry("Irlande", "Ireland", "Éire", "IE", category="country"),
    _entry("Pays-Bas", "Netherlands", "Hollande", "NL", category="country"),
    _entry("Portugal", "PT", "República Portuguesa", category="country"),
    _entry(
        "États-Unis",
        "United States", "USA", "US", "America", "États-Unis d'Amérique",
        category="country",
    ),
    _entry("Canada", "CA", "Dominion of Canada", category="country"),
    _entry("Algérie", "Algeria", "DZ", "Algérie française", category="country"),
    _entry("Maroc", "Morocco", "MA", "Royaume du Maroc", category="country"),
    _entry("Tunisie", "Tunisia", "TN", "République tunisienne", category="country"),
)

_REGIONS = (
    _entry("Auvergne-Rhône-Alpes", "Auvergne", "Rhône-Alpes", category="region"),
    _entry("Bourgogne-Franche-Comté", "Bourgogne", "Franche-Comté", category="region"),
    _entry("Bretagne", "Brittany", "Breizh", category="region"),
    _entry("Centre-Val de Loire", "Centre", "Région Centre", category="region"),
    _entry("Corse", "Corsica", "Île de Beauté", category="region"),
    _entry("Grand Est", "Alsace", "Lorraine", "Champagne-Ardenne", category="region"),
    _entry("Hauts-de-France", "Nord-Pas-de-Calais", "Picardie", category="region"),
    _entry("Île-de-France", "Région parisienne", "IDF", category="region"),
    _entry("Normandie", "Normandy", "Haute-Normandie", "Basse-Normandie", category="region"),
    _entry("Nouvelle-Aquitaine", "Aquitaine", "Limousin", "Poitou-Charentes", category="region"),
    _entry(
        "Occitanie", "Midi-Pyrénées", "Languedoc-Roussillon", "Occitania", category="region"
    ),
    _entry("Pays de la Loire", "Pays de Loire", "Pays Loire", category="region"),
    _entry("Provence-Alpes-Côte d'Azur", "Provence", "PACA", category="region"),
)

# "code label" rows; each gets the aliases "code", "label (code)" and "code label"
_DEPARTMENT_ROWS = """
01 Ain|02 Aisne|03 Allier|04 Alpes-de-Haute-Provence|05 Hautes-Alpes|06 Alpes-Maritimes
07 Ardèche|08 Ardennes|09 Ariège|10 Aube|11 Aude|12 Aveyron|13 Bouches-du-Rhône|14 Calvados
15 Cantal|16 Charente|17 Charente-Maritime|18 Cher|19 Corrèze|2A Corse-du-Sud|2B Haute-Corse
21 Côte-d'Or|22 Côtes-d'Armor|23 Creuse|24 Dordogne|25 Doubs|26 Drôme|27 Eure|28 Eure-et-Loir
29 Finistère|30 Gard|31 Haute-Garonne|32 Gers|33 Gironde|34 Hérault|35 Ille-et-Vilaine|36 Indre
37 Indre-et-Loire|38 Isère|39 Jura|40 Landes|41 Loir-et-Cher|42 Loire|43 Haute-Loire
44 Loire-Atlantique|45 Loiret|46 Lot|47 Lot-et-Garonne|48 Lozère|49 Maine-et-Loire|50 Manche
51 Marne|52 Haute-Marne|53 Mayenne|54 Meurthe-et-Moselle|55 Meuse|56 Morbihan|57 Moselle
58 Nièvre|59 Nord|60 Oise|61 Orne|62 Pas-de-Calais|63 Puy-de-Dôme|64 Pyrénées-Atlantiques
65 Hautes-Pyrénées|66 Pyrénées-Orientales|67 Bas-Rhin|68 Haut-Rhin|69 Rhône|70 Haute-Saône
71 Saône-et-Loire|72 Sarthe|73 Savoie|74 Haute-Savoie|76 Seine-Maritime|77 Seine-et-Marne
78 Yvelines|79 Deux-Sèvres|80 Somme|81 Tarn|82 Tarn-et-Garonne|83 Var|84 Vaucluse|85 Vendée
86 Vienne|87 Haute-Vienne|88 Vosges|89 Yonne|90 Territoire de Belfort|91 Essonne
92 Hauts-de-Seine|93 Seine-Saint-Denis|94 Val-de-Marne|95 Val-d'Oise|971 Guadeloupe
972 Martinique|973 Guyane|974 La Réunion|976 Mayotte
"""

_TERRITORY_ROWS = """
975 Saint-Pierre-et-Miquelon|977 Saint-Barthélemy|978 Saint-Martin
984 Terres australes et antarctiques françaises|986 Wallis-et-Futuna|987 Polynésie française
988 Nouvelle-Calédonie|989 Île de Clipperton
"""


def _coded(rows: str, category: str) -> tuple[VocabularyEntry, ...]:
    entries = []
    for row in re.split(r"[|\n]", rows):
        row = row.strip()
        if not row:
            continue
        code, label = row.split(" ", 1)
        aliases = [code, f"{label} ({code})", f"{code} {label}"]
        if code.startswith("0"):
            aliases.append(code.lstrip("0"))
        entries.append(VocabularyEntry(label=label, aliases=aliases, category=category))
    return tuple(entries)


_CITIES = (
    _entry("Paris", "75", "Paris (75)", "75 Paris", "Ville de Paris", "75e", category="city"),
    *(
        _entry(city, f"Ville de {city}", category="city")
        for city in (
            "Marseille", "Lyon", "Toulouse", "Nice", "Nantes", "Strasbourg",
            "Montpellier", "Bordeaux", "Lille", "Rennes", "Grenoble",
        )
    ),
)

# Later entries override earlier ones for shared aliases ("75" → Paris)
TEMPLATE_PLACES: tuple[VocabularyEntry, ...] = (
    *_COUNTRIES,
    *_REGIONS,
    *_coded(_DEPARTMENT_ROWS, "department"),
    *_coded(_TERRITORY_ROWS, "territory"),
    *_CITIES,
)


# =============================================================================
# Matching
# =============================================================================


@dataclass
class ParsedProfession:
    profession: str
    tokens: list[str] = field(default_factory=list)


@dataclass
class PlaceMatch:
    fragment: str
    canonical: str
    category: str | None = None


@dataclass
class ParsedPlace:
    place: str
    tokens: list[str] = field(default_factory=list)
    matches: list[PlaceMatch] = field(default_factory=list)


class Vocabulary:
    """Alias lookup over a list of entries; later entries win on conflicts."""

    def __init__(self, entries: Iterable[VocabularyEntry]) -> None:
        self._aliases: dict[str, VocabularyEntry] = {}
        for entry in entries:
            label = entry.label.strip()
            if not label:
                continue
            for alias in (label, *entry.aliases):
                key = normalize_token(alias)
                if not key:
                    continue
                self._aliases[key] = entry
                self._aliases[key.replace(" ", "")] = entry

    @classmethod
    def with_overrides(
        cls, builtin: Sequence[VocabularyEntry], overrides: Sequence[VocabularyEntry] = ()
    ) -> Vocabulary:
        return cls([*builtin, *overrides])

    def lookup(self, value: str) -> VocabularyEntry | None:
        key = normalize_token(value)
        if not key:
            return None
        return self._aliases.get(key) or self._aliases.get(key.replace(" ", ""))

    def __contains__(self, value: str) -> bool:
        return self.lookup(value) is not None


def parse_profession(
    text: str, entries: Sequence[VocabularyEntry] | Vocabulary = TEMPLATE_PROFESSIONS
) -> ParsedProfession:
    """Recognize canonical professions in free text.

    Fragments split on ``,``, ``;`` and ``/``; a fragment that does not match
    as a whole is tried word by word, stopping at the first recognized word.

    Example:
        >>> parse_profession("Fermier, Marchande").tokens
        ['Agriculteur', 'Marchand']
    """
    profession = (text or "").strip()
    result = ParsedProfession(profession=profession)
    if not profession:
        return result

    vocabulary = entries if isinstance(entries, Vocabulary) else Vocabulary(entries)

    def _push(value: str) -> bool:
        entry = vocabulary.lookup(value)
        if entry is None:
            return False
        if entry.label not in result.tokens:
            result.tokens.append(entry.label)
        return True

    for fragment in PROFESSION_SEPARATORS.split(profession):
        fragment = fragment.strip()
        if not fragment or _push(fragment):
            continue
        for word in fragment.split():
            if _push(word):
                break

    return result


def parse_place(
    text: str, entries: Sequence[VocabularyEntry] | Vocabulary = TEMPLATE_PLACES
) -> ParsedPlace:
    """Recognize canonical places in a comma/semicolon separated place string.

    Example:
        >>> parse_place("Brittany, France").tokens
        ['Bretagne', 'France']
    """
    place = (text or "").strip()
    result = ParsedPlace(place=place)
    if not place:
        return result

    vocabulary = entries if isinstance(entries, Vocabulary) else Vocabulary(entries)
    for fragment in PLACE_SEPARATORS.split(place):
        fragment = fragment.strip()
        if not fragment:
            continue
        entry = vocabulary.lookup(fragment)
        if entry is None:
            continue
        if entry.label not in result.tokens:
            result.tokens.append(entry.label)
        result.matches.append(
            PlaceMatch(fragment=fragment, canonical=entry.label, category=entry.category)
        )
    return result
