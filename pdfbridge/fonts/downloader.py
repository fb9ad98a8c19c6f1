"""Download missing fonts from Google Fonts.

Only fonts with a known mapping can be fetched. Display names reported by
InDesign ("Poppins (OTF) Medium", "Solway-Bold", "Open Sans Bold") are
normalized to a ``family-weight`` key first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import anyio
import httpx

from pdfbridge.config.constants import DEFAULT_FONT_DOWNLOAD_TIMEOUT, GOOGLE_FONTS_CSS_URL
from pdfbridge.config.settings import FontMappingConfig
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FontSource:
    """A Google Fonts family and numeric weight."""

    family: str
    variant: str


FONT_MAPPING: dict[str, FontSource] = {
    # Poppins
    "poppins-thin": FontSource("Poppins", "100"),
    "poppins-extralight": FontSource("Poppins", "200"),
    "poppins-light": FontSource("Poppins", "300"),
    "poppins-regular": FontSource("Poppins", "400"),
    "poppins-medium": FontSource("Poppins", "500"),
    "poppins-semibold": FontSource("Poppins", "600"),
    "poppins-bold": FontSource("Poppins", "700"),
    "poppins-extrabold": FontSource("Poppins", "800"),
    "poppins-black": FontSource("Poppins", "900"),
    # Solway
    "solway-light": FontSource("Solway", "300"),
    "solway-regular": FontSource("Solway", "400"),
    "solway-medium": FontSource("Solway", "500"),
    "solway-bold": FontSource("Solway", "700"),
    "solway-extrabold": FontSource("Solway", "800"),
    # Roboto
    "roboto-regular": FontSource("Roboto", "400"),
    "roboto-medium": FontSource("Roboto", "500"),
    "roboto-bold": FontSource("Roboto", "700"),
    # Open Sans
    "opensans-regular": FontSource("Open Sans", "400"),
    "opensans-semibold": FontSource("Open Sans", "600"),
    "opensans-bold": FontSource("Open Sans", "700"),
    # Lato
    "lato-regular": FontSource("Lato", "400"),
    "lato-bold": FontSource("Lato", "700"),
}

# Compound weights first so "ExtraBold" is not read as "Bold"
WEIGHT_NAMES = (
    "extralight",
    "extrabold",
    "semibold",
    "thin",
    "light",
    "regular",
    "medium",
    "bold",
    "black",
)

_FAMILY_WORD_RE = re.compile(r"[A-Z][a-z]+")
_PARENTHESIZED_RE = re.compile(r"\([^)]*\)")
_FONT_URL_RE = re.compile(r"url\((https://[^)]+\.(?:ttf|woff2))\)")

# Google Fonts serves TTF URLs to non-browser agents only when asked like a browser
_USER_AGENT = "Mozilla/5.0"


def normalize_font_name(display_name: str) -> str:
    """Normalize a font display name to a ``family-weight`` lookup key.

    The family is the leading run of capitalized words, lowercased and joined;
    the weight is the first later token that starts with a weight keyword, so
    a family such as "Thinker" is never read as a weight.

    Examples:
        >>> normalize_font_name("Poppins (OTF) Medium")
        'poppins-medium'
        >>> normalize_font_name("Open Sans Bold")
        'opensans-bold'
    """
    lower_name = display_name.lower()
    tokens = re.split(r"[\s\-]+", display_name.strip())

    family_words: list[str] = []
    for token in tokens:
        if not _FAMILY_WORD_RE.fullmatch(token) or token.lower() in WEIGHT_NAMES:
            break
        family_words.append(token.lower())

    if family_words:
        family = "".join(family_words)
        weight = next(
            (
                w
                for token in tokens[len(family_words) :]
                for w in WEIGHT_NAMES
                if token.lower().startswith(w)
            ),
            None,
        )
        return f"{family}-{weight}" if weight else family

    # Fallback for names without a capitalized family word
    cleaned = _PARENTHESIZED_RE.sub("", lower_name)
    cleaned = re.sub(r"[^a-z0-9\s-]", "", cleaned)
    parts = [part for part in re.split(r"[\s-]+", cleaned) if part]
    unique_parts = list(dict.fromkeys(parts))
    return "-".join(unique_parts)


class FontDownloader:
    """Resolves font names to Google Fonts downloads.

    Args:
        extra_mappings: Additional ``family-weight`` keys on top of :data:`FONT_MAPPING`
        timeout: HTTP timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        extra_mappings: dict[str, FontMappingConfig] | None = None,
        timeout: float = DEFAULT_FONT_DOWNLOAD_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.mapping = dict(FONT_MAPPING)
        for key, entry in (extra_mappings or {}).items():
            self.mapping[key.lower()] = FontSource(entry.family, entry.variant)
        self.timeout = timeout
        self._transport = transport

    def resolve(self, name: str) -> tuple[str, FontSource] | None:
        """Return ``(normalized_name, source)`` or None when there is no mapping."""
        normalized = normalize_font_name(name)
        source = self.mapping.get(normalized)
        if source is None:
            return None
        return normalized, source

    async def acquire(self, name: str, target_dir: Path) -> Path | None:
        """Download ``name`` into ``target_dir``.

        Never raises: unknown fonts and network or file errors return None.

        Returns:
            Path of the downloaded ``<normalized>.ttf`` file, or None
        """
        resolved = self.resolve(name)
        if resolved is None:
            log.warning(
                "No download source for font",
                font=name,
                normalized=normalize_font_name(name),
            )
            return None

        normalized, source = resolved
        output_path = target_dir / f"{normalized}.ttf"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            await self._download(source, output_path)
        except (httpx.HTTPError, OSError, ValueError) as e:
            log.warning("Failed to download font", font=name, error=str(e))
            return None

        log.info("Font downloaded", font=name, path=str(output_path))
        return output_path

    async def acquire_all(self, names: list[str], target_dir: Path) -> list[Path]:
        """Download several fonts one after another, skipping failures."""
        downloaded: list[Path] = []
        for name in names:
            path = await self.acquire(name, target_dir)
            if path is not None:
                downloaded.append(path)
        log.info("Font downloads finished", downloaded=len(downloaded), requested=len(names))
        return downloaded

    async def _download(self, source: FontSource, output_path: Path) -> None:
        params = {"family": f"{source.family}:wght@{source.variant}"}
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": _USER_AGENT},
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            log.debug("Fetching font CSS", family=source.family, variant=source.variant)
            css_response = await client.get(GOOGLE_FONTS_CSS_URL, params=params)
            css_response.raise_for_status()

            match = _FONT_URL_RE.search(css_response.text)
            if match is None:
                raise ValueError(
                    f"Could not find font file URL for {source.family} {source.variant}"
                )

            font_response = await client.get(match.group(1))
            font_response.raise_for_status()

        async with await anyio.open_file(output_path, "wb") as f:
            await f.write(font_response.content)
