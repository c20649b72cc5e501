"""Сборка иконочного веб-шрифта (SVG, TTF, WOFF, WOFF2, EOT) вместе с CSS, страницей предпросмотра и картой имён из папки SVG-иконок."""

__version__ = "0.3.0"
