"""Генерация сопутствующих веб-файлов.

Каждый генератор это чистая функция от упорядоченных иконок и настроек
сборки, поэтому CSS, страница предпросмотра и карта имён всегда совпадают со
шрифтом по именам и кодам.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Sequence

from .escape import camel_case, css_identifier, css_string, html_escape
from .models import BuildConfiguration, IconEntry


def relative_url(target: Path, start_dir: Path) -> str:
    return Path(os.path.relpath(target, start_dir)).as_posix()


def icon_selector(entry: IconEntry, config: BuildConfiguration) -> str:
    selector = f".{css_identifier(entry.css_class)}"
    if not config.css_prefix:
        selector = f".{css_identifier(config.css_base)}{selector}"
    return selector


def shared_selector(config: BuildConfiguration) -> str:
    if config.css_base:
        return f".{css_identifier(config.css_base)}"
    prefix = css_identifier(config.css_prefix)
    return f'[class^="{prefix}"], [class*=" {prefix}"]'


def render_stylesheet(entries: Sequence[IconEntry], config: BuildConfiguration) -> str:
    css_dir = config.artifact_path("css").parent

    def url(extension: str, suffix: str = "") -> str:
        return css_string(relative_url(config.artifact_path(extension), css_dir) + suffix)

    family = css_string(config.font_name)
    head = f"""@font-face {{
  font-family: {family};
  src: url({url("eot")}); /* IE9 Compat Modes */
  src: url({url("eot", "?iefix")}) format('embedded-opentype'), /* IE6-IE8 */
    url({url("woff2")}) format('woff2'), /* Edge 14+, Chrome 36+, Firefox 39+, some mobile */
    url({url("woff")}) format('woff'),  /* IE 9+, Edge, Firefox 3.6+, Chrome 5+, Safari 5.1+ */
    url({url("ttf")}) format('truetype'), /* Safari, Android, iOS */
    url({url("svg")}) format('svg'); /* Legacy iOS */
  font-weight: normal;
  font-style: normal;
}}
{shared_selector(config)} {{
  font-family: {family} !important; /* Use !important to prevent issues with browser extensions that change fonts */
  speak: none;
  font-style: normal;
  font-weight: normal;
  font-variant: normal;
  text-transform: none;
  line-height: 1;
  text-rendering: optimizeSpeed; /* Kerning and ligatures aren't needed */
  -webkit-font-smoothing: antialiased;
  -moz-osx-font-smoothing: grayscale;
}}
"""
    rules = [
        f"{icon_selector(entry, config)}:before {{\n  content: {css_string(entry.char)}\n}}"
        for entry in entries
    ]
    return head + "".join(rule + "\n" for rule in rules)


PREVIEW_STYLE = """        .s2w__page-title {
            font-family: Helvetica, Arial, Sans-Serif;
            margin: 20px 0 10px 0;
        }
        .s2w__page-wrap {
            margin: 0 auto;
            max-width: 1000px;
            padding: 0 1rem;
        }
        .s2w__container {
            display: flex;
            flex-flow: row wrap;
            justify-content: space-around;
        }
        .s2w__icon-link {
            display: block;
            text-align: center;
            border: 1px solid #ccc;
            padding: 5px;
            margin: 3px;
            flex: 1 1 100px;
            width: 100px;
            text-decoration: none;
            color: black;
            min-width: 100px;
            max-width: 150px;
        }
        .s2w__icon-link:hover {
            background-color: #3af;
            color: white;
        }
        .s2w__icon-link > i {
            font-size: 32px;
            background-color: #eee;
        }
        .s2w__icon-link:hover > i {
            background-color: #2E99E6;
        }
        .s2w__classname {
            display: block;
            font-family: monospace;
            font-size: 10px;
            white-space: nowrap;
            max-width: 100%;
            overflow: hidden;
            text-overflow: ellipsis;
        }"""

# Клик по ячейке выделяет имя класса и копирует его в буфер обмена
PREVIEW_SCRIPT = """        [].forEach.call(document.querySelectorAll('.s2w__icon-link'), function (a) {
            a.addEventListener('click', function (ev) {
                ev.preventDefault();
                var classname = a.querySelector('.s2w__classname');
                if (classname) {
                    var range = document.createRange();
                    range.selectNodeContents(classname);
                    var selection = window.getSelection();
                    selection.removeAllRanges();
                    selection.addRange(range);
                    document.execCommand('Copy', false, null);
                }
            }, false);
        });"""


def render_preview(entries: Sequence[IconEntry], config: BuildConfiguration) -> str:
    html_dir = config.artifact_path("html").parent
    title = html_escape(config.font_name)
    stylesheet = html_escape(relative_url(config.artifact_path("css"), html_dir))
    cells = "\n            ".join(
        f'<a href="" class="s2w__icon-link"><i class="{html_escape(entry.html_class)}"></i>'
        f'<span class="s2w__classname">{html_escape(entry.html_class)}</span></a>'
        for entry in entries
    )
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>{title} Preview</title>
    <link rel="stylesheet" href="{stylesheet}">
    <style>
{PREVIEW_STYLE}
    </style>
  </head>
  <body>
    <div class="s2w__page-wrap">
        <h1 class="s2w__page-title">{title}</h1>
        <div class="s2w__container">
            {cells}
        </div>
    </div>
    <script>
{PREVIEW_SCRIPT}
    </script>
  </body>
</html>
"""


def build_name_map(entries: Sequence[IconEntry]) -> Dict[str, str]:
    """camelCase-имя иконки -> строка классов. При совпадении имён побеждает последняя иконка."""
    icon_map: Dict[str, str] = {}
    for entry in entries:
        icon_map[camel_case(entry.name)] = entry.html_class
    return icon_map


def render_name_map(entries: Sequence[IconEntry]) -> str:
    payload = json.dumps(build_name_map(entries), ensure_ascii=False, indent=4)
    return f"export default {payload};\n"
