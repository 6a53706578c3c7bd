"""
RPSL Text Reader - Splits RPSL text into objects

Objects are separated by blank lines. Comment lines (starting with '%' or '#')
are dropped, '#' starts an inline comment, and lines starting with whitespace
or '+' continue the previous attribute.
"""

import logging
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from rpsl_bgp.rpsl.objects import RpslAttribute, RpslObject
from rpsl_bgp.utils.error_handling import ObjectParseError


def split_objects(lines: Iterable[str]) -> Iterator[str]:
    """Yield the raw text of each blank-line separated object"""
    current = []
    for line in lines:
        line = line.rstrip("\r\n")
        if line.strip() == "":
            if current:
                yield "\n".join(current)
                current = []
            continue
        current.append(line)

    if current:
        yield "\n".join(current)


def _strip_comment(line: str) -> str:
    comment = line.find("#")
    if comment > -1:
        line = line[:comment]
    return line.rstrip()


def parse_attributes(text: str) -> List[RpslAttribute]:
    """
    Parse one object's text into attributes.

    Raises:
        ObjectParseError: a line is neither "name: value" nor a continuation
    """
    attributes = []
    name = None
    value_parts = []

    for raw_line in text.split("\n"):
        if raw_line.startswith("%") or raw_line.startswith("#"):
            continue

        if raw_line[:1].isspace() or raw_line.startswith("+"):
            if name is None:
                raise ObjectParseError("Continuation line without attribute", text)
            continuation = _strip_comment(raw_line[1:]).strip()
            if continuation:
                value_parts.append(continuation)
            continue

        line = _strip_comment(raw_line)
        if not line:
            continue

        attr_name, sep, attr_value = line.partition(":")
        attr_name = attr_name.strip().lower()
        if not sep or not attr_name or " " in attr_name:
            raise ObjectParseError(f"Cannot parse line: {raw_line}", text)

        if name is not None:
            attributes.append(RpslAttribute(name, " ".join(value_parts)))
        name = attr_name
        value_parts = [attr_value.strip()] if attr_value.strip() else []

    if name is not None:
        attributes.append(RpslAttribute(name, " ".join(value_parts)))

    return attributes


def parse_object(text: str) -> RpslObject:
    """Parse the text of a single object (raises ObjectParseError)"""
    return RpslObject(parse_attributes(text))


class RpslObjectReader:
    """
    Reads a batch of RPSL objects, skipping the ones that fail to parse.

    Failed objects are logged with a short excerpt and kept in `skipped`
    so the caller can report them.
    """

    def __init__(self, excerpt_lines: int = 3):
        self.logger = logging.getLogger(__name__)
        self.excerpt_lines = excerpt_lines
        self.skipped: List[ObjectParseError] = []

    def read(self, source: Union[str, TextIO, Iterable[str]]) -> Iterator[RpslObject]:
        """Yield parsed objects from text, a file object, or an iterable of lines"""
        if isinstance(source, str):
            source = source.splitlines()

        for text in split_objects(source):
            try:
                attributes = parse_attributes(text)
                if not attributes:
                    # comment-only block
                    continue
                obj = RpslObject(attributes)
            except ObjectParseError as e:
                if e.object_text is None:
                    e.object_text = text
                self.skipped.append(e)
                self._log_skipped(text, e)
                continue

            yield obj

    def read_all(self, source: Union[str, TextIO, Iterable[str]]) -> List[RpslObject]:
        return list(self.read(source))

    def _log_skipped(self, text: str, error: ObjectParseError) -> None:
        lines = [line for line in text.split("\n") if line.strip()]
        excerpt = lines[:self.excerpt_lines]
        if len(lines) > self.excerpt_lines:
            excerpt.append("...")

        self.logger.warning(
            "Unable to parse following object, skipping... (%s)\n%s",
            error.message, "\n".join(excerpt)
        )


def read_objects(source: Union[str, TextIO, Iterable[str]],
                 excerpt_lines: int = 3,
                 reader: Optional[RpslObjectReader] = None) -> List[RpslObject]:
    """Convenience wrapper: parse every readable object in source"""
    reader = reader or RpslObjectReader(excerpt_lines=excerpt_lines)
    return reader.read_all(source)
