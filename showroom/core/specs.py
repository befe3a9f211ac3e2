"""Localized specification values and their rendering.

Product specifications (dimensions, materials, set components, ...) were
authored with inconsistent shapes. Raw JSON is parsed into a small tagged
variant and rendered per language by structural recursion:

    Scalar     plain value                      -> str(value)
    Localized  {"en": ..., "vi": ...}           -> the requested language
    SpecList   [...]                            -> items joined with ", "
    SpecGroup  {"key": ..., ...} (other maps)   -> labeled sub-list

Rendering accepts any JSON value and never raises.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

Language = Literal["en", "vi"]
SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "vi")
DEFAULT_LANGUAGE: Language = "en"

LIST_SEPARATOR = ", "

# Display labels for specification keys, per language
SPEC_LABELS: dict[str, dict[str, str]] = {
    "en": {
        # Dimensions
        "dai": "Length",
        "rong": "Width",
        "cao": "Height",
        "sau": "Depth",
        "duong_kinh_mat_ghe": "Seat Diameter",
        "chieu_cao_tong_the": "Total Height",
        "do_sau_long_ghe": "Internal Depth",
        "mat_ghe": "Seat Surface",
        "chieu_cao": "Height",
        "chieu_cao_mat_ngoi": "Seat Height",
        "tui_hong": "Side Pocket",
        "duong_kinh": "Diameter",
        "ban_lon": "Large Table",
        "ban_nho": "Small Table",
        "dung_tich_luu_tru_lit": "Storage Capacity (L)",
        "ghe_don": "Ottoman",
        "ghe_bang": "Bench",
        # Materials
        "vai": "Fabric",
        "go": "Wood",
        "chan_ghe": "Legs",
        "khung": "Frame",
        "mat_ban": "Table Top",
        "be_mat": "Surface Finish",
        "vo_boc": "Upholstery",
        "dem_mut": "Foam",
        "khung_va_chan": "Frame & Legs",
        "vai_boc": "Fabric Cover",
    },
    "vi": {
        "dai": "Dài",
        "rong": "Rộng",
        "cao": "Cao",
        "sau": "Sâu",
        "duong_kinh_mat_ghe": "Đường kính mặt ghế",
        "chieu_cao_tong_the": "Chiều cao tổng thể",
        "do_sau_long_ghe": "Độ sâu lòng ghế",
        "mat_ghe": "Mặt ghế",
        "chieu_cao": "Chiều cao",
        "chieu_cao_mat_ngoi": "Chiều cao mặt ngồi",
        "tui_hong": "Túi hông",
        "duong_kinh": "Đường kính",
        "ban_lon": "Bàn lớn",
        "ban_nho": "Bàn nhỏ",
        "dung_tich_luu_tru_lit": "Dung tích lưu trữ",
        "ghe_don": "Ghế đôn",
        "ghe_bang": "Ghế băng",
        "vai": "Vải",
        "go": "Gỗ",
        "chan_ghe": "Chân ghế",
        "khung": "Khung",
        "mat_ban": "Mặt bàn",
        "be_mat": "Bề mặt",
        "vo_boc": "Vỏ bọc",
        "dem_mut": "Đệm mút",
        "khung_va_chan": "Khung và Chân",
        "vai_boc": "Vải bọc",
    },
}

_WORD_START = re.compile(r"\b\w")

# Rendered output: text, or a labeled sub-list of {"label", "value"} entries
RenderedSpec = str | list[dict[str, Any]]


@dataclass(frozen=True)
class Scalar:
    """Plain value (string, number, bool or null)."""

    value: Any


@dataclass(frozen=True)
class Localized:
    """Parallel English/Vietnamese variants."""

    en: SpecValue
    vi: SpecValue

    def pick(self, lang: str) -> SpecValue:
        return self.vi if lang == "vi" else self.en


@dataclass(frozen=True)
class SpecList:
    """Ordered sequence of values."""

    items: tuple[SpecValue, ...]


@dataclass(frozen=True)
class SpecGroup:
    """Named sub-values, e.g. a table's large and small dimensions."""

    entries: tuple[tuple[str, SpecValue], ...]


SpecValue = Scalar | Localized | SpecList | SpecGroup


def is_localized_mapping(raw: Any) -> bool:
    """True for a mapping whose keys are exactly "en" and "vi"."""
    return isinstance(raw, Mapping) and set(raw.keys()) == {"en", "vi"}


def parse_spec(raw: Any) -> SpecValue:
    """Parse raw JSON into a SpecValue."""
    if is_localized_mapping(raw):
        return Localized(en=parse_spec(raw["en"]), vi=parse_spec(raw["vi"]))
    if isinstance(raw, Mapping):
        return SpecGroup(tuple((str(key), parse_spec(value)) for key, value in raw.items()))
    if isinstance(raw, (list, tuple)):
        return SpecList(tuple(parse_spec(item) for item in raw))
    return Scalar(raw)


def format_key(key: str, lang: str) -> str:
    """Translate a specification key into a display label.

    Unknown keys fall back to snake_case -> Title Case.
    """
    label = SPEC_LABELS.get(lang, {}).get(key)
    if label:
        return label
    return _WORD_START.sub(lambda m: m.group().upper(), key.replace("_", " "))


def render(spec: SpecValue, lang: str) -> RenderedSpec:
    """Render a parsed SpecValue for one language."""
    match spec:
        case Localized():
            return render(spec.pick(lang), lang)
        case SpecList():
            return LIST_SEPARATOR.join(_as_text(render(item, lang)) for item in spec.items)
        case SpecGroup():
            return [
                {"label": format_key(key, lang), "value": render(value, lang)}
                for key, value in spec.entries
            ]
        case Scalar():
            return _scalar_text(spec.value)


def render_spec(raw: Any, lang: str = DEFAULT_LANGUAGE) -> RenderedSpec:
    """Parse and render a raw specification value.

    Example:
        >>> render_spec({"en": "Oak", "vi": "Sồi"}, "vi")
        'Sồi'
        >>> render_spec([{"en": "A", "vi": "B"}, {"en": "C", "vi": "D"}], "en")
        'A, C'
    """
    return render(parse_spec(raw), lang)


def localized_lines(raw: Any, lang: str = DEFAULT_LANGUAGE) -> list[str]:
    """Bullet lines for one language from a description-like value.

    Accepts {"en": [...], "vi": [...]}, {"en": "...", "vi": "..."}, a bare
    list, a bare string, or anything else (rendered as a single line).
    """
    if raw is None:
        return []
    if isinstance(raw, Mapping) and lang in raw:
        raw = raw[lang]
    elif is_localized_mapping(raw):
        raw = raw[DEFAULT_LANGUAGE]

    if isinstance(raw, (list, tuple)):
        lines = [_as_text(render_spec(item, lang)) for item in raw]
    else:
        lines = [_as_text(render_spec(raw, lang))]
    return [line for line in lines if line.strip()]


def localized_text(raw: Any, lang: str = DEFAULT_LANGUAGE) -> str:
    """Single string for one language (names, labels)."""
    return _as_text(render_spec(raw, lang))


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_text(rendered: RenderedSpec) -> str:
    """Flatten a rendered group into "Label: value; ..." text."""
    if isinstance(rendered, str):
        return rendered
    return "; ".join(f"{entry['label']}: {_as_text(entry['value'])}" for entry in rendered)
