"""Pull ``<?example ?>`` blocks out of prose, check them, and highlight them.

Examples are enclosed in processing instructions::

    <?example {language: python, testable: true, caption: "A fine example"} ?>
    answer = 6 * 7
    print(answer)
    <?end example ?>

Recognised option keys:

``language``
    Language the example is written in; selects both the validator and the
    highlighter. A bare word on its own is taken as the language.
``testable``
    When true and a validator exists for the language, run it and prepend any
    error it reports.
``caption``
    Text shown beneath the example. Omitted when absent.

The scan is a single pass over the source: after each start instruction the
filter looks for the *next* end instruction, so look-alike text is never
matched across examples. Running out of input inside an example raises
:class:`UnterminatedExampleError`.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from darkdocs._constants import DEFAULT_EXAMPLE_LANGUAGE

from .base import FilterContext, PageFilter

if typ.TYPE_CHECKING:
    from darkdocs.highlighting import HighlighterRegistry
    from darkdocs.validators import ValidatorRegistry

EXAMPLE_PI = re.compile(
    r"""
    <\?
        example                 # instruction target
        (?:                     # optional instruction body
            \s+
            (                   # options blob
                (?:[^?]|\?(?!>))*
            )
        )?
    \?>
    """,
    re.VERBOSE,
)

END_PI = re.compile(r"<\?end(?:\s+example)?\s*\?>")

OPTION_KEYS = frozenset({"language", "testable", "caption"})


class UnterminatedExampleError(ValueError):
    """Raised when an example block has no matching end instruction."""

    def __init__(self, line: int) -> None:
        self.line = line
        super().__init__(f"Unterminated example at line {line}")


class ExampleOptionsError(ValueError):
    """Raised when an example's options blob is not a valid mapping."""


@dc.dataclass(frozen=True, slots=True)
class ExampleOptions:
    """Parsed options for a single example block."""

    language: str = DEFAULT_EXAMPLE_LANGUAGE
    testable: bool = True
    caption: str | None = None


def parse_example_options(
    blob: str | None, default_language: str = DEFAULT_EXAMPLE_LANGUAGE
) -> ExampleOptions:
    """Parse an example's options blob.

    Parameters
    ----------
    blob : str | None
        Text between ``<?example`` and ``?>``: a YAML flow mapping, with or
        without its braces, or a bare language name. Empty values are ignored.
    default_language : str
        Language used when the blob does not name one.

    Returns
    -------
    ExampleOptions
        Options merged over the defaults.

    Raises
    ------
    ExampleOptionsError
        If the blob is neither a language name nor a mapping.
    """
    text = (blob or "").strip()
    if not text:
        return ExampleOptions(language=default_language)
    if not text.startswith("{"):
        text = f"{{{text}}}"

    loader = YAML(typ="safe")
    try:
        loaded = loader.load(text)
    except YAMLError as exc:
        msg = f"Invalid example options {text!r}: {exc}"
        raise ExampleOptionsError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Example options must be a mapping, got {text!r}"
        raise ExampleOptionsError(msg)

    if len(loaded) == 1:
        ((key, value),) = loaded.items()
        if value is None and key not in OPTION_KEYS:
            return ExampleOptions(language=str(key))

    options: dict[str, typ.Any] = {}
    for key, value in loaded.items():
        if value is None or (isinstance(value, str | list | dict) and len(value) == 0):
            continue
        options[str(key)] = value

    testable = options.get("testable", True)
    if isinstance(testable, str):
        testable = testable.strip().lower() in {"true", "yes", "on", "1"}
    caption = options.get("caption")
    return ExampleOptions(
        language=str(options.get("language", default_language)),
        testable=bool(testable),
        caption=str(caption) if caption is not None else None,
    )


class ExamplesFilter(PageFilter):
    """Replace example blocks with captioned, highlighted containers."""

    name: typ.ClassVar[str] = "examples"

    def __init__(
        self,
        highlighters: HighlighterRegistry,
        validators: ValidatorRegistry,
        *,
        default_language: str = DEFAULT_EXAMPLE_LANGUAGE,
    ) -> None:
        self.highlighters = highlighters
        self.validators = validators
        self.default_language = default_language

    def process(self, source: str, context: FilterContext) -> str:  # noqa: ARG002
        """Return ``source`` with every example block rendered.

        Raises
        ------
        UnterminatedExampleError
            If a start instruction has no matching end instruction.
        """
        buffer: list[str] = []
        pos = 0
        while pos < len(source):
            start = EXAMPLE_PI.search(source, pos)
            if start is None:
                break
            buffer.append(source[pos : start.start()])

            end = END_PI.search(source, start.end())
            if end is None:
                raise UnterminatedExampleError(source.count("\n", 0, start.start()) + 1)

            body = source[start.end() : end.start()]
            buffer.append(self.render_example(start.group(1), body))
            pos = end.end()
        buffer.append(source[pos:])
        return "".join(buffer)

    def render_example(self, blob: str | None, body: str) -> str:
        """Validate, highlight, and caption a single example ``body``."""
        options = parse_example_options(blob, self.default_language)
        content = body
        if options.testable:
            content = self.validators.validate(content, options.language)

        highlighted = self.highlighters.highlight(content.strip(), options.language)
        caption = ""
        if options.caption:
            caption = f'<div class="caption">{escape(options.caption)}</div>'
        return f'\n\n<div class="example">{highlighted}{caption}</div>\n\n'


__all__ = [
    "END_PI",
    "OPTION_KEYS",
    "EXAMPLE_PI",
    "ExampleOptions",
    "ExampleOptionsError",
    "ExamplesFilter",
    "UnterminatedExampleError",
    "parse_example_options",
]
