"""Notice -- the transport form of a UI toast."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class Notice(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


def success_notice(title: str, description: str) -> Notice:
    return Notice(title=title, description=description)


def error_notice(title: str, description: str) -> Notice:
    return Notice(title=title, description=description, variant="destructive")
