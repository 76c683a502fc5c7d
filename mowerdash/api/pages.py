"""Minimal HTML pages for the browser routes."""

from __future__ import annotations

from html import escape
from typing import Optional

from ..services import Mower, RemoteError


def page(title: str, body: str) -> str:
    return (
        "<!doctype html>\n"
        f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head>\n"
        f"<body>\n<h2>{escape(title)}</h2>\n{body}\n</body></html>"
    )


def landing_page() -> str:
    return page(
        "Automower Connect Dashboard",
        '<a href="/login">Login with Automower Connect</a>',
    )


def dashboard_page(mower: Optional[Mower], start_minutes: int) -> str:
    if mower is None:
        return page("Automower Dashboard", "<p>No mowers linked to your account.</p>")

    battery = "unknown" if mower.battery_percent is None else f"{mower.battery_percent}%"
    body = (
        f"<p><strong>Name:</strong> {escape(mower.name or mower.id)}</p>\n"
        f"<p><strong>Status:</strong> {escape(mower.activity or 'unknown')}</p>\n"
        f"<p><strong>Battery:</strong> {escape(battery)}</p>\n"
        f'<form method="POST" action="/start?duration={start_minutes}">\n'
        f'  <button type="submit">Start Mowing ({start_minutes} min)</button>\n'
        "</form>\n"
        '<form method="POST" action="/park">\n'
        '  <button type="submit">Park Mower</button>\n'
        "</form>\n"
        '<form method="POST" action="/logout">\n'
        '  <button type="submit">Log out</button>\n'
        "</form>"
    )
    return page("Automower Dashboard", body)


def error_page(title: str, error: RemoteError) -> str:
    details = error.body or str(error)
    status = "" if error.status_code is None else f"<p>HTTP {error.status_code}</p>\n"
    return page(title, f"{status}<pre>{escape(details)}</pre>\n<a href=\"/\">Back</a>")


__all__ = ["dashboard_page", "error_page", "landing_page", "page"]
