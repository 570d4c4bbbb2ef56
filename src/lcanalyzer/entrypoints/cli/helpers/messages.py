"""Terminal message helpers for the lcanalyzer CLI.

Status lines go to stderr so stdout can carry results (CSV, JSON) that are
piped into other tools. Emoji glyphs fall back to ASCII on terminals that
cannot encode them.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr."""

    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(pair: tuple[str, str]) -> str:
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Return "⚠️" when stderr can encode it, else "[!]"."""
    return _glyph(CAUTION)


def success_glyph() -> str:
    """Return "✅" when stderr can encode it, else "[OK]"."""
    return _glyph(SUCCESS)


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr.

    Example:
        ``⚠️  Column 'mag' contains NaN values.``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr.

    Example:
        ``✅  Wrote 120 rows to out.csv``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)
