"""
HTMLRenderer - Jinja2 rendering for the attribution detail view.

The CRM card's primary action opens this view in an iframe. Templates live in
``templates/`` as ``<name>.html.j2`` and are autoescaped; money, ROI, ROAS and
dates go through the filters registered below.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

DETAILS_TEMPLATE = "attribution_details"


class HTMLRenderer:
    """
    Render the attribution detail view (or another bundled template).

    Example:
        renderer = HTMLRenderer()
        html = renderer.render(DETAILS_TEMPLATE, card_data.to_dict())
    """

    def __init__(self, templates_dir: Path | str | None = None):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = Path(templates_dir)
        self._env: Environment | None = None

    @property
    def env(self) -> Environment:
        """Jinja2 environment, created on first use."""
        if self._env is None:
            env = Environment(
                loader=FileSystemLoader(str(self.templates_dir)),
                autoescape=select_autoescape(["html", "xml", "j2"]),
            )
            env.filters.update(
                format_currency=self._format_currency,
                format_percent=self._format_percent,
                format_number=self._format_number,
                format_multiplier=self._format_multiplier,
                format_date=self._format_date,
            )
            self._env = env

        return self._env

    def render(self, template: str, data: dict[str, Any]) -> str:
        """
        Render ``<template>.html.j2`` with ``data`` as its context.

        Raises:
            jinja2.TemplateNotFound: If the template does not exist.
        """
        return self.env.get_template(f"{template}.html.j2").render(**data)

    @staticmethod
    def _format_currency(value: float, symbol: str = "$") -> str:
        return f"{symbol}{value:,.2f}"

    @staticmethod
    def _format_percent(value: float, decimals: int = 1) -> str:
        """ROI is already a percentage: 122.2 -> "122.2%"."""
        return f"{value:.{decimals}f}%"

    @staticmethod
    def _format_number(value: float, decimals: int = 0) -> str:
        return f"{value:,.{decimals}f}"

    @staticmethod
    def _format_multiplier(value: float, decimals: int = 2) -> str:
        """ROAS as a multiplier, e.g. ``3.00x``."""
        return f"{value:.{decimals}f}x"

    @staticmethod
    def _format_date(value: date | datetime | str, fmt: str = "%Y-%m-%d") -> str:
        if isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value.strftime(fmt)
