"""Экранирование и нормализация имён для всех генераторов.

CSS-экранирование повторяет правила ``cssesc``: печатный ASCII остаётся как
есть, остальное превращается в шестнадцатеричный escape. В идентификаторах
дополнительно экранируются пунктуация и ведущая цифра или ``-<цифра>``.
"""

from __future__ import annotations

import html
import re
import unicodedata

CSS_SINGLE_ESCAPE = re.compile(r"[ -,./:-@\[-\^`{-~]")
CSS_WHITESPACE = re.compile(r"[\t\n\f\r\x0b]")
CSS_EXCESSIVE_SPACES = re.compile(r"(^|\\+)?(\\[A-F0-9]{1,6})\x20(?![a-fA-F0-9\x20])")

FILE_NAME_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
FILE_NAME_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
FILE_NAME_RESERVED = re.compile(r"^\.+$")
FILE_NAME_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
FILE_NAME_WINDOWS_TRAILING = re.compile(r"[. ]+$")
FILE_NAME_MAX_BYTES = 255

WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+|[^\W\d_]+")


def _hex_escape(char: str) -> str:
    return f"\\{ord(char):X} "


def _css_escape(value: str, identifier: bool, quote: str = "'") -> str:
    out = []
    for char in value:
        code = ord(char)
        if code < 0x20 or code > 0x7E or CSS_WHITESPACE.match(char):
            out.append(_hex_escape(char))
        elif char == "\\" or (not identifier and char == quote) or (identifier and CSS_SINGLE_ESCAPE.match(char)):
            out.append("\\" + char)
        else:
            out.append(char)
    output = "".join(out)

    if identifier and value:
        if re.match(r"^-[-\d]", output):
            output = "\\-" + output[1:]
        elif value[0].isdigit() and value[0].isascii():
            output = f"\\3{value[0]} " + output[1:]

    def _trim(match: re.Match) -> str:
        backslashes = match.group(1)
        if backslashes and len(backslashes) % 2:
            return match.group(0)
        return (backslashes or "") + match.group(2)

    return CSS_EXCESSIVE_SPACES.sub(_trim, output)


def css_identifier(value: str) -> str:
    """Экранирует ``value`` для CSS-идентификатора (имя класса, часть селектора)."""
    return _css_escape(value, identifier=True)


def css_string(value: str, quote: str = "'") -> str:
    """Возвращает ``value`` как строковый литерал CSS в кавычках."""
    return quote + _css_escape(value, identifier=False, quote=quote) + quote


def html_escape(value: str) -> str:
    return html.escape(value, quote=True)


def sanitize_file_name(name: str) -> str:
    """Убирает символы, недопустимые в именах файлов на распространённых ОС."""
    cleaned = FILE_NAME_ILLEGAL.sub("", name)
    cleaned = FILE_NAME_CONTROL.sub("", cleaned)
    cleaned = FILE_NAME_RESERVED.sub("", cleaned)
    cleaned = FILE_NAME_WINDOWS_RESERVED.sub("", cleaned)
    cleaned = FILE_NAME_WINDOWS_TRAILING.sub("", cleaned)
    encoded = cleaned.encode("utf-8")
    if len(encoded) > FILE_NAME_MAX_BYTES:
        cleaned = encoded[:FILE_NAME_MAX_BYTES].decode("utf-8", errors="ignore")
    return cleaned


def _deburr(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def camel_case(name: str) -> str:
    """Имя иконки в camelCase (``weather-rain`` -> ``weatherRain``)."""
    text = _deburr(name).replace("'", "").replace("’", "")
    words = WORD_PATTERN.findall(text)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in tail)
