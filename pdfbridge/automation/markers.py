"""Marker strings and patterns used to read Adobe automation output.

Every string the classifier matches against lives here so the rules can be
reviewed and unit-tested without spawning InDesign or Acrobat.
"""

import re

# Lines containing any of these are macOS runtime noise, not script output
NOISE_SUBSTRINGS = (
    "Class AdobeSimpleURLSession",
    "objc[",
    "is implemented in both",
    "One of the duplicates must be removed",
)

# Sentinels written by the generated scripts on failure
ERROR_MARKER = "ERROR:"
COMPARISON_FAILED_MARKER = "COMPARISON_FAILED"
CONVERT_ERROR_MARKERS = (ERROR_MARKER,)
COMPARE_ERROR_MARKERS = (ERROR_MARKER, COMPARISON_FAILED_MARKER)

# Everything after the first sentinel, across lines
ERROR_TEXT_RE = re.compile(r"(?:ERROR|COMPARISON_FAILED):\s*(.+)", re.DOTALL)

# Wrapper boilerplate stripped from user-visible diagnostics, applied in order
DIAGNOSTIC_CLEANUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # Temp script path with optional line:column, e.g. "/var/folders/x/script.scpt:165:205: "
    (re.compile(r"^.*\.(?:scpt|applescript|jsx)(?::\d+:\d+)?:\s*", re.MULTILINE), ""),
    # "execution error: Adobe InDesign 2026 got an error: "
    (re.compile(r"execution error:\s*Adobe [A-Za-z ]+?\d*\s+got an error:\s*", re.IGNORECASE), ""),
    (re.compile(r"execution error:\s*", re.IGNORECASE), ""),
    (re.compile(r"Uncaught JavaScript exception:\s*", re.IGNORECASE), ""),
    # JavaScript Error objects stringify as "Error: <message>"
    (re.compile(r"^Error:\s*", re.MULTILINE), ""),
    # Trailing AppleScript error numbers like "(54)" or "(-1728)"
    (re.compile(r"\s*\([-0-9]+\)\s*$", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
)

# ExtendScript strings reach stdout with their newlines still escaped
ESCAPED_NEWLINE = "\\n"

# Missing-font block written by the conversion script's preflight audit
MISSING_FONTS_HEADER_RE = re.compile(r"Missing Fonts\b[^\n]*", re.IGNORECASE)
FOLLOWING_SUBHEADER_RE = re.compile(r"\bfollowing\b.*\b(?:are|is)\b", re.IGNORECASE)

# Lines containing these end (or never start) a font list
TERMINATOR_KEYWORDS = (
    "Solutions",
    "Available",
    "Missing Images",
    "Missing Links",
    "Corrupt",
    "Inaccessible",
    "Please fix",
)
MORE_ENTRIES_RE = re.compile(r"^\.\.\.\s*and\s+\d+\s+more", re.IGNORECASE)

# Leading bullet characters on list entries
BULLET_RE = re.compile(r"^[\s\-•*·]+")

# Entries read "<font name> (<family> <style>)", for example
# "Poppins (OTF)\tMedium (Poppins (OTF) Medium)". The name is everything before
# the trailing annotation; InDesign separates family and style with a tab.
FONT_ANNOTATION_RE = re.compile(r"\s*\((?:[^()]|\([^()]*\))*\)\s*$")
FONT_ENTRY_START_RE = re.compile(r"^[A-Z]")

WEIGHT_KEYWORDS = (
    "Thin",
    "ExtraLight",
    "Light",
    "Regular",
    "Medium",
    "SemiBold",
    "Bold",
    "ExtraBold",
    "Black",
    "Italic",
)

# Loose fallback: Capitalized(-Capitalized)* optionally followed by a weight
FONT_FALLBACK_RE = re.compile(
    r"\b([A-Z][a-z0-9]+(?:-[A-Z][A-Za-z0-9]+)*(?:\s(?:" + "|".join(WEIGHT_KEYWORDS) + r"))?)\b"
)

# Structural words that the fallback must never report as font names
FONT_STOPLIST = frozenset(
    {
        "Missing",
        "Fonts",
        "Font",
        "Document",
        "Error",
        "Errors",
        "Please",
        "InDesign",
        "PDF",
        "Export",
        "Images",
        "Links",
        "Corrupt",
        "Inaccessible",
        "Solutions",
        "Available",
        "The",
        "Following",
        "Critical",
        "Fix",
        "These",
    }
)

# Diagnostics starting with this come from the preflight audit, before export
PREFLIGHT_MARKER = "Document has critical errors that prevent PDF export"

# Hints appended to comparison failures, keyed by a substring of the output
COMPARE_FAILURE_TIPS = (
    ("syntax error", "Tip: The generated AppleScript failed to compile on this macOS version."),
    (
        "not allowed",
        "Tip: Allow Terminal/osascript under System Settings > Privacy & Security > "
        "Accessibility and enable JavaScript in Acrobat preferences.",
    ),
)
