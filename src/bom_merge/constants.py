"""
Static Knowledge Base for the BOM merge engine.

This module serves as the central repository for:
1.  **Layout Markers:** Header substrings used to pick a row parser.
2.  **Noise Patterns:** Page furniture that must never reach the classifier.
3.  **Classification Tables:** Keyword and location-code rules mapping text to a
    PartType.
4.  **Part Number Tables:** Ordered (pattern, canonical) pairs for transistors and
    ICs. Order matters: the first matching pattern wins.
"""

import re

from src.bom_merge.types import PartType

# --- Layout Detection ---

# Checked in this order; a document carrying both markers is a Shopping List.
SHOPPING_LIST_MARKER = "SHOPPING"
PARTS_LIST_MARKER = "LOCATIONVALUE"

# Literal column header of the Parts List layout.
PARTS_LIST_HEADER = ("LOCATION", "VALUE", "TYPE", "NOTES")

# --- Noise Filtering ---

# Applied to every cell individually.
NOISE_PATTERNS = [
    re.compile(r"COPYRIGHT", re.IGNORECASE),
    re.compile(r"©"),
    re.compile(r"PEDALPCB\.COM", re.IGNORECASE),
    # Bare section headings only; "Film Capacitors" is a type hint, not noise.
    re.compile(
        r"^\s*(?:RESISTORS|CAPACITORS|TRANSISTORS|INTEGRATED CIRCUITS)\s*:?\s*$",
        re.IGNORECASE,
    ),
    re.compile(r"CONTINUED", re.IGNORECASE),
    re.compile(r"PAGE \d+", re.IGNORECASE),
    re.compile(r"^\s*•\s*$"),
    re.compile(r"NEXT PAGE(?:\.\.\.|…)", re.IGNORECASE),
    re.compile(r"TYPE NOTE", re.IGNORECASE),
    re.compile(r"DIAGRAM", re.IGNORECASE),
]

DIGITS_ONLY = re.compile(r"^\d+$")
HEADER_CELL = re.compile(r"^[A-Za-z\s]+$")

# Generic layout: rows where every cell is this short are OCR debris.
GARBLED_CELL_MAX_LEN = 2

# Shopping list rows wider than this keep their full text as the value for
# semiconductors (part number and package are split across cells).
WIDE_ROW_CELLS = 5

# --- Switch / Pot Heuristics ---

# Pole designations anywhere in a detail cell (Parts List layout).
POLE_PATTERN = re.compile(r"SPDT|DPDT|SPST|DPST", re.IGNORECASE)

# A value that is nothing but a pole count, optionally with its throw pattern.
# Matches "3PDT", "SPDT", "PDT", "DPDT (ON-ON)".
POLE_VALUE = re.compile(r"^(?:[1-9]PDT|S?PDT)(?:\s*\([^)]+\))?$", re.IGNORECASE)

# Parenthesised switch qualifier, e.g. "(ON-OFF-ON)".
QUALIFIER = re.compile(r"\(.*\)")

# Taper + resistance marking, e.g. "B100K", "A1M".
POT_CODE = re.compile(r"\b[ABCW]\d{1,3}[MK]\b", re.IGNORECASE)

# Designator style trimmer label used as a hint ("VR1", "TPOT").
TRIMPOT_CODE = re.compile(r"^(?:VR|TPOT)\d{0,3}$", re.IGNORECASE)

DIP_LOCATION = re.compile(r"^DIP\d{0,3}$", re.IGNORECASE)

# --- Type Normalizer ---

# Free-text hint keywords. Evaluated top to bottom, first hit wins.
# Schema: (substrings, optional full-hint regex, PartType)
TYPE_KEYWORDS: list[tuple[tuple[str, ...], re.Pattern[str] | None, PartType]] = [
    (("resistor", "¼"), None, PartType.RESISTOR),
    (("film",), None, PartType.FILM),
    (("elec",), None, PartType.ELECTROLYTIC),
    (("ceramic",), None, PartType.CERAMIC),
    (("capacitor",), None, PartType.CAPACITOR),
    (("inductor",), None, PartType.INDUCTOR),
    (("led", "3mm", "5mm", "diffused"), None, PartType.LED),
    (("diode", "zener"), None, PartType.DIODE),
    (("switch", "toggle"), POLE_VALUE, PartType.SWITCH),
    (("trim", "trimmer"), TRIMPOT_CODE, PartType.TRIMPOT),
    (("potentiometer", "pot", "16mm", "16 mm"), None, PartType.POTENTIOMETER),
    (("jack",), None, PartType.JACK),
    (("connector",), None, PartType.CONNECTOR),
    (("transistor", "bjt", "fet", "pnp", "npn"), None, PartType.TRANSISTOR),
    (("ic", "op amp", "op-amp", "opamp"), None, PartType.IC),
]

# --- Location Code Classifier (Generic layout) ---

# Capacitor locations are resolved separately (sub-type depends on the value).
CAPACITOR_LOCATION = re.compile(r"^C\d{1,3}$", re.IGNORECASE)

# Schema: (fullmatch regex, PartType). First hit wins.
LOCATION_RULES: list[tuple[re.Pattern[str], PartType]] = [
    (re.compile(r"^R\d{1,3}$", re.IGNORECASE), PartType.RESISTOR),
    (re.compile(r"^L\d{1,3}$", re.IGNORECASE), PartType.INDUCTOR),
    (re.compile(r"^D\d{1,3}$", re.IGNORECASE), PartType.DIODE),
    (re.compile(r"^Q\d{1,3}$", re.IGNORECASE), PartType.TRANSISTOR),
    (re.compile(r"^IC\d{1,3}$", re.IGNORECASE), PartType.IC),
    (re.compile(r"^LED\d{0,3}$", re.IGNORECASE), PartType.LED),
    (re.compile(r"^SW", re.IGNORECASE), PartType.SWITCH),
    (
        re.compile(r"^(?:VR|TPOT|TRIM)\d{0,3}$", re.IGNORECASE),
        PartType.TRIMPOT,
    ),
    (re.compile(r"^(?:POT|16MM)\d{0,3}$", re.IGNORECASE), PartType.POTENTIOMETER),
    (re.compile(r"^J\d{0,3}$", re.IGNORECASE), PartType.JACK),
    (re.compile(r"^REG\d{0,3}$", re.IGNORECASE), PartType.REGULATOR),
]

# Value hints for capacitor sub-types, checked in order against the lower-cased value.
CAPACITOR_HINTS: list[tuple[re.Pattern[str], PartType]] = [
    (re.compile(r"\d+p|ceramic|disk"), PartType.CERAMIC),
    (re.compile(r"\d+n|film|mylar"), PartType.FILM),
    (re.compile(r"\d+[uµμ]|electrolytic|alu"), PartType.ELECTROLYTIC),
]

# --- Value Normalizer ---

# Types whose values get the "4K7" -> "4.7K" shorthand rewrite.
STRICT_NOTATION_TYPES = frozenset(
    {
        PartType.RESISTOR,
        PartType.ELECTROLYTIC,
        PartType.INDUCTOR,
        PartType.CERAMIC,
        PartType.FILM,
    }
)

SHORTHAND_VALUE = re.compile(r"^(\d{1,3})([RKMUNP])(\d{1,2})$", re.IGNORECASE)

# Values that are already a clean part code (BC547, MPSA13) are left alone.
CLEAN_PART_CODE = re.compile(r"^[A-Z]{2,3}\d{2,4}$", re.IGNORECASE)
TWO_N_PART = re.compile(r"(?<!\w)(2N\d+[A-C]?)", re.IGNORECASE)

# Common pedal transistors, matched against the start of the value.
# Schema: (prefix regex, canonical spelling)
TRANSISTOR_PARTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(pattern, re.IGNORECASE), canonical)
    for pattern, canonical in [
        (r"^J201", "J201"),
        (r"^2N3904", "2N3904"),
        (r"^2N3906", "2N3906"),
        (r"^2N5088", "2N5088"),
        (r"^2N5089", "2N5089"),
        (r"^2N5087", "2N5087"),
        (r"^BC549C?", "BC549C"),
        (r"^BC550C?", "BC550C"),
        (r"^BC560C?", "BC560C"),
        (r"^2N2222A?", "2N2222A"),
        (r"^PN2222A?", "PN2222A"),
        (r"^PN2907A?", "PN2907A"),
        (r"^2N2907A?", "2N2907A"),
        (r"^2N5457", "2N5457"),
        (r"^2N5484", "2N5484"),
        (r"^J113", "J113"),
        (r"^MPF102", "MPF102"),
        (r"^BS170", "BS170"),
        (r"^2N7000", "2N7000"),
        (r"^2N5550", "2N5550"),
        (r"^MPSA18", "MPSA18"),
        (r"^MP38A", "MP38A"),
    ]
]

# Generic semiconductor descriptions, checked against the whole row text.
# Schema: (required words, canonical)
TRANSISTOR_PHRASES: list[tuple[tuple[str, str], str]] = [
    (("GERMANIUM", "NPN"), "NPN Germanium"),
    (("GERMANIUM", "PNP"), "PNP Germanium"),
    (("SILICON", "NPN"), "NPN Silicon"),
    (("SILICON", "PNP"), "PNP Silicon"),
]

# Op-amps and friends, matched anywhere in the value.
# On text naming two chips ("TL072 / 4558") the one listed first here wins.
IC_PARTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(part, re.IGNORECASE), part)
    for part in [
        "OP07",
        "OP275",
        "NE5532",
        "LM324",
        "LM308",
        "LM1458",
        "LM741",
        "TL074",
        "TL072",
        "TL071",
        "4558",
    ]
]
