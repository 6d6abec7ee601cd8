from __future__ import annotations
from typing import Dict, Tuple

# Romaji spellings per kana unit. The first spelling of each entry is the one
# shown on screen; every spelling is accepted while typing.
PATTERN_TABLE: Dict[str, Tuple[str, ...]] = {
    # vowels
    "あ": ("a",),
    "い": ("i", "yi"),
    "う": ("u", "wu", "whu"),
    "え": ("e",),
    "お": ("o",),
    # k / g
    "か": ("ka", "ca"),
    "き": ("ki",),
    "く": ("ku", "cu", "qu"),
    "け": ("ke",),
    "こ": ("ko", "co"),
    "が": ("ga",),
    "ぎ": ("gi",),
    "ぐ": ("gu",),
    "げ": ("ge",),
    "ご": ("go",),
    # s / z
    "さ": ("sa",),
    "し": ("shi", "si", "ci"),
    "す": ("su",),
    "せ": ("se", "ce"),
    "そ": ("so",),
    "ざ": ("za",),
    "じ": ("ji", "zi"),
    "ず": ("zu",),
    "ぜ": ("ze",),
    "ぞ": ("zo",),
    # t / d
    "た": ("ta",),
    "ち": ("chi", "ti"),
    "つ": ("tsu", "tu"),
    "て": ("te",),
    "と": ("to",),
    "だ": ("da",),
    "ぢ": ("di",),
    "づ": ("du",),
    "で": ("de",),
    "ど": ("do",),
    # n
    "な": ("na",),
    "に": ("ni",),
    "ぬ": ("nu",),
    "ね": ("ne",),
    "の": ("no",),
    # h / b / p
    "は": ("ha",),
    "ひ": ("hi",),
    "ふ": ("fu", "hu"),
    "へ": ("he",),
    "ほ": ("ho",),
    "ば": ("ba",),
    "び": ("bi",),
    "ぶ": ("bu",),
    "べ": ("be",),
    "ぼ": ("bo",),
    "ぱ": ("pa",),
    "ぴ": ("pi",),
    "ぷ": ("pu",),
    "ぺ": ("pe",),
    "ぽ": ("po",),
    # m
    "ま": ("ma",),
    "み": ("mi",),
    "む": ("mu",),
    "め": ("me",),
    "も": ("mo",),
    # y / r / w
    "や": ("ya",),
    "ゆ": ("yu",),
    "よ": ("yo",),
    "ら": ("ra",),
    "り": ("ri",),
    "る": ("ru",),
    "れ": ("re",),
    "ろ": ("ro",),
    "わ": ("wa",),
    "ゐ": ("wyi",),
    "ゑ": ("wye",),
    "を": ("wo",),
    "ん": ("nn", "xn", "n"),
    "ゔ": ("vu",),
    # digraphs
    "うぁ": ("wha",),
    "うぃ": ("wi", "whi"),
    "うぇ": ("we", "whe"),
    "うぉ": ("who",),
    "きゃ": ("kya",),
    "きぃ": ("kyi",),
    "きゅ": ("kyu",),
    "きぇ": ("kye",),
    "きょ": ("kyo",),
    "ぎゃ": ("gya",),
    "ぎぃ": ("gyi",),
    "ぎゅ": ("gyu",),
    "ぎぇ": ("gye",),
    "ぎょ": ("gyo",),
    "くぁ": ("qa", "qwa", "kwa"),
    "くぃ": ("qi", "qwi"),
    "くぇ": ("qe", "qwe"),
    "くぉ": ("qo", "qwo"),
    "ぐぁ": ("gwa",),
    "しゃ": ("sha", "sya"),
    "しぃ": ("syi",),
    "しゅ": ("shu", "syu"),
    "しぇ": ("she", "sye"),
    "しょ": ("sho", "syo"),
    "じゃ": ("ja", "zya", "jya"),
    "じぃ": ("jyi", "zyi"),
    "じゅ": ("ju", "zyu", "jyu"),
    "じぇ": ("je", "zye", "jye"),
    "じょ": ("jo", "zyo", "jyo"),
    "ちゃ": ("cha", "tya", "cya"),
    "ちぃ": ("tyi", "cyi"),
    "ちゅ": ("chu", "tyu", "cyu"),
    "ちぇ": ("che", "tye", "cye"),
    "ちょ": ("cho", "tyo", "cyo"),
    "ぢゃ": ("dya",),
    "ぢぃ": ("dyi",),
    "ぢゅ": ("dyu",),
    "ぢぇ": ("dye",),
    "ぢょ": ("dyo",),
    "つぁ": ("tsa",),
    "つぃ": ("tsi",),
    "つぇ": ("tse",),
    "つぉ": ("tso",),
    "てゃ": ("tha",),
    "てぃ": ("thi",),
    "てゅ": ("thu",),
    "てぇ": ("the",),
    "てょ": ("tho",),
    "でゃ": ("dha",),
    "でぃ": ("dhi",),
    "でゅ": ("dhu",),
    "でぇ": ("dhe",),
    "でょ": ("dho",),
    "とぅ": ("twu",),
    "どぅ": ("dwu",),
    "にゃ": ("nya",),
    "にぃ": ("nyi",),
    "にゅ": ("nyu",),
    "にぇ": ("nye",),
    "にょ": ("nyo",),
    "ひゃ": ("hya",),
    "ひぃ": ("hyi",),
    "ひゅ": ("hyu",),
    "ひぇ": ("hye",),
    "ひょ": ("hyo",),
    "ふぁ": ("fa", "fwa"),
    "ふぃ": ("fi", "fwi"),
    "ふぇ": ("fe", "fwe"),
    "ふぉ": ("fo", "fwo"),
    "ふゅ": ("fyu",),
    "びゃ": ("bya",),
    "びぃ": ("byi",),
    "びゅ": ("byu",),
    "びぇ": ("bye",),
    "びょ": ("byo",),
    "ぴゃ": ("pya",),
    "ぴぃ": ("pyi",),
    "ぴゅ": ("pyu",),
    "ぴぇ": ("pye",),
    "ぴょ": ("pyo",),
    "みゃ": ("mya",),
    "みぃ": ("myi",),
    "みゅ": ("myu",),
    "みぇ": ("mye",),
    "みょ": ("myo",),
    "りゃ": ("rya",),
    "りぃ": ("ryi",),
    "りゅ": ("ryu",),
    "りぇ": ("rye",),
    "りょ": ("ryo",),
    "ゔぁ": ("va",),
    "ゔぃ": ("vi",),
    "ゔぇ": ("ve",),
    "ゔぉ": ("vo",),
    # small kana typed on their own
    "ぁ": ("xa", "la"),
    "ぃ": ("xi", "li"),
    "ぅ": ("xu", "lu"),
    "ぇ": ("xe", "le"),
    "ぉ": ("xo", "lo"),
    "ゃ": ("xya", "lya"),
    "ゅ": ("xyu", "lyu"),
    "ょ": ("xyo", "lyo"),
    "ゎ": ("xwa", "lwa"),
    "っ": ("xtu", "xtsu", "ltu", "ltsu"),
    # marks
    "ー": ("-",),
    "、": (",",),
    "。": (".",),
    "・": ("/",),
    "「": ("[",),
    "」": ("]",),
    "〜": ("~",),
}


def lookup(unit: str) -> Tuple[str, ...] | None:
    """Candidate spellings for a kana unit, or None if the table has no entry."""
    return PATTERN_TABLE.get(unit)
