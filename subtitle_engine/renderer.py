"""ASS subtitle rendering.

WHY: The video assembly step burns subtitles with a renderer that parses
``Dialogue:`` lines positionally, so the output must follow one fixed
template: the same header, two styles, and centisecond timecodes.

HOW: render() emits the header (parameterized only by title) followed by
one Dialogue line per cue. Each cue text gets best-effort keyword emphasis
(first 2–4 character CJK run, wrapped in override tags) and has its double
quotes escaped.

RULES:
- Timecodes are H:MM:SS.CC — hours unbounded, centiseconds rounded.
- Exactly two styles: Default (white) and Highlight (yellow, bold).
- Empty title becomes DEFAULT_TITLE.
- Same input → byte-identical output.
"""

from typing import List, Optional, Sequence

from .models import TimedCue

DEFAULT_TITLE = "Generated Subtitle"

ASS_HEADER_TEMPLATE = """[Script Info]
Title: {title}
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
YCbCr Matrix: TV.601
PlayResX: 1920
PlayResY: 1080

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Microsoft YaHei,36,&H00FFFFFF,&H000000FF,&H00000000,&H80000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,427,1
Style: Highlight,Microsoft YaHei,36,&H0000FFFF,&H000000FF,&H00000000,&H80000000,1,0,0,0,100,100,0,0,1,2,2,2,10,10,427,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""

DIALOGUE_TEMPLATE = "Dialogue: 0,{start},{end},Default,,0,0,0,,{text}"

HIGHLIGHT_TEMPLATE = "{{\\c&H0000FFFF&\\b1}}{keyword}{{\\c&H00FFFFFF&\\b0}}"

_DOUBLE_QUOTES = ("\"", "“", "”")

_KEYWORD_MIN = 2
_KEYWORD_MAX = 4


def format_ass_time(seconds: float) -> str:
    """Convert seconds to ASS time format: H:MM:SS.CC"""
    centis = int(round(max(0.0, seconds) * 100))
    hours, centis = divmod(centis, 360000)
    minutes, centis = divmod(centis, 6000)
    secs, centis = divmod(centis, 100)
    return "{:d}:{:02d}:{:02d}.{:02d}".format(hours, minutes, secs, centis)


def is_cjk(char: str) -> bool:
    return "\u4e00" <= char <= "\u9fff"


def find_keyword(text: str) -> Optional[str]:
    """Return the first run of 2-4 contiguous CJK ideographs in text.

    A longer run yields its first four characters. This is a positional
    heuristic, not named-entity recognition.
    """
    i = 0
    while i < len(text) - 1:
        if is_cjk(text[i]) and is_cjk(text[i + 1]):
            end = i + _KEYWORD_MIN
            while end < len(text) and end - i < _KEYWORD_MAX and is_cjk(text[end]):
                end += 1
            return text[i:end]
        i += 1
    return None


def highlight_keyword(text: str) -> str:
    """Wrap the keyword in highlight override tags if it occurs exactly once."""
    keyword = find_keyword(text)
    if keyword is None or text.count(keyword) != 1:
        return text
    return text.replace(keyword, HIGHLIGHT_TEMPLATE.format(keyword=keyword), 1)


def escape_text(text: str) -> str:
    """Escape straight and curly double quotes as a backslash-quote."""
    for quote in _DOUBLE_QUOTES:
        text = text.replace(quote, "\\\"")
    return text


class SubtitleRenderer:
    """Render timed cues as an ASS document.

    Args:
        highlight: Apply keyword emphasis to cue text (default on).
    """

    def __init__(self, highlight: bool = True) -> None:
        self.highlight = highlight

    def render(self, cues: Sequence[TimedCue], title: str = "") -> str:
        """Return the full ASS file content for cues.

        Args:
            cues: Aligned cues in display order.
            title: Script title; empty means DEFAULT_TITLE.

        Returns:
            Header plus newline-joined Dialogue lines.
        """
        header = ASS_HEADER_TEMPLATE.format(title=title or DEFAULT_TITLE)
        events = [self.render_cue(cue) for cue in cues]  # type: List[str]
        return header + "\n".join(events)

    def render_cue(self, cue: TimedCue) -> str:
        text = highlight_keyword(cue.text) if self.highlight else cue.text
        return DIALOGUE_TEMPLATE.format(
            start=format_ass_time(cue.start_time),
            end=format_ass_time(cue.end_time),
            text=escape_text(text),
        )
