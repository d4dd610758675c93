# patterns.py
import re

MONTH_ABBR = r"(?:JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEPT|SEP|OCT|NOV|DEC)"
MONTH_FULL = (
    r"(?:JANUARY|FEBRUARY|MARCH|APRIL|MAY|JUNE|JULY|AUGUST|SEPTEMBER|OCTOBER|NOVEMBER|DECEMBER)"
)
# 12-hour suffix: "PM", "P.M.", "P"; never the start of a longer word ("ARR")
_PERIOD = r"(?:\s?([AP])\.?(?:M\.?)?(?![A-Z]))?"
_PERIOD_NC = r"(?:\s?[AP]\.?(?:M\.?)?(?![A-Z]))?"
_FLIGHT_PREFIX = r"(?:[A-Z]{2}|[A-Z]\d|\d[A-Z])"


class Patterns:
    # ---- times ----
    TIME = re.compile(r"(?<![\d:])(\d{1,2}):(\d{2})(?!\d)" + _PERIOD)
    # Digit look-alikes accepted inside a clock reading ("1O:3O")
    TIME_LOOSE = re.compile(r"(?<![\w:])([0-9OISBL]{1,2}):([0-9OISBL]{2})(?![0-9OISBL])" + _PERIOD)

    # ---- flight numbers ----
    FLIGHT = re.compile(r"\b(" + _FLIGHT_PREFIX + r") ?(\d{1,4})\b")
    FLIGHT_PARTS = re.compile(r"\b(" + _FLIGHT_PREFIX + r")\s*(\d{1,4})\b")

    # ---- dates ----
    DATE_FULL = re.compile(r"\b(" + MONTH_FULL + r")\s+(\d{1,2})(?:ST|ND|RD|TH)?,?\s*(\d{4})\b")
    DATE_FULL_DAY_FIRST = re.compile(r"\b(\d{1,2})(?:ST|ND|RD|TH)?\s+(" + MONTH_FULL + r"),?\s*(\d{4})\b")
    DATE_ABBR = re.compile(r"\b(\d{1,2}) ?(" + MONTH_ABBR + r")(?: ?(\d{4}|\d{2}))?\b")
    DATE_ABBR_MONTH_FIRST = re.compile(r"\b(" + MONTH_ABBR + r") ?(\d{1,2}),? ?(\d{4})\b")
    DATE_ISO = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
    DATE_NUMERIC = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})\b")

    # ---- labeled fields ----
    GATE = re.compile(r"\b(?:GATE|GT)\b\s*[:#.]?\s*([A-Z]?\d{1,3}[A-Z]?)\b")
    SEAT_LABELED = re.compile(r"\bSEAT\b\s*(?:NO\.?)?\s*[:#]?\s*(\d{1,3}[A-K])\b")
    TERMINAL = re.compile(r"\b(?:TERMINAL|TERM)\b\s*[:#]?\s*([A-Z0-9]{1,2})\b")
    CONFIRMATION_LABELED = re.compile(
        r"\b(?:CONFIRMATION|CONF|PNR|BOOKING|RECORD LOCATOR|REF)"
        r"(?:\s*(?:CODE|NUMBER|NO\.?|REF(?:ERENCE)?))?\s*[:#]?\s*([A-Z0-9]{5,7})\b"
    )
    FROM_ANCHOR = re.compile(r"\bFROM\b\s*:?\s*([A-Z]{3})\b")
    TO_ANCHOR = re.compile(r"\bTO\b\s*:?\s*([A-Z]{3})\b")
    ROUTE = re.compile(r"\b([A-Z]{3}) ?(?:\bTO\b|-|–|→|>|/) ?([A-Z]{3})\b")

    # ---- generic fields ----
    AIRPORT = re.compile(r"\b([A-Z]{3})\b")
    SEAT = re.compile(r"(?<![A-Z0-9])(\d{1,3}[A-K])(?![A-Z0-9])")
    CONFIRMATION = re.compile(r"\b(?=[A-Z0-9]{6}\b)(?=[A-Z]*\d)(?=\d*[A-Z])([A-Z0-9]{6})\b")
    PASSENGER = re.compile(
        r"\b([A-Z][A-Z'-]+) ?/ ?([A-Z][A-Z'-]+?)(?: ?(MR|MRS|MS|MISS|MSTR|DR))?\b"
    )

    # ---- table rows (single line) ----
    FLIGHT_DATE_TIME_ROW = re.compile(
        r"\b(" + _FLIGHT_PREFIX + r") ?(\d{1,4}) +"
        r"(\d{1,2} ?" + MONTH_ABBR + r"(?: ?\d{4}| ?\d{2})?) +"
        r"(\d{1,2}:\d{2}" + _PERIOD_NC + r")"
    )
    GATE_BOARDING_SEAT_ROW = re.compile(
        r"(?:\bGATE\b *:? *)?\b([A-Z]?\d{1,3}[A-Z]?) +"
        r"(?:BOARDING *(?:TILL|TIME)? *:? *)?(\d{1,2}:\d{2}) +"
        r"(?:SEAT *:? *)?(\d{1,3}[A-K])\b"
    )

    # ---- time-role keywords (searched in the lookback window) ----
    TIME_KEYWORDS = (
        ("boarding", re.compile(r"\bBOARD(?:ING|S)?\b")),
        ("departure", re.compile(r"\b(?:DEPART(?:URE|S)?|DEP|DEPT|LEAVES?|ETD|STD)\b")),
        ("arrival", re.compile(r"\b(?:ARRIV(?:AL|ES?)?|ARR|LANDS?|ETA|STA)\b")),
    )
    HEADER_KEYWORDS = re.compile(r"\b(BOARD\w*|DEPART\w*|DEP|ARRIV\w*|ARR)\b")

    # ---- confidence-shape heuristics ----
    SHAPE_FLIGHT = re.compile(r"^[A-Z]{2}\d{1,4}$")
    SHAPE_AIRPORT = re.compile(r"^[A-Z]{3}$")
    SHAPE_TIME = re.compile(r"^\d{1,2}:\d{2}$")
    SHAPE_SEAT = re.compile(r"^\d{1,2}[A-F]$")
    SHAPE_GATE = re.compile(r"^[A-Z]?\d{1,3}[A-Z]?$")
    SHAPE_O_ZERO = re.compile(r"\dO|O\d|[A-Z]0[A-Z]")
    SHAPE_I_ONE = re.compile(r"[IL]\d|\d[IL]|[A-Z]1[A-Z]")
    SHAPE_PUNCT = re.compile(r"[^\w\s:/-]")
    SHAPE_WORD = re.compile(r"^[A-Z]{2,}$")


patterns = Patterns()
