"""Optional and Result wrapper types, plus the lint rules that enforce them."""

from typesafe import optional, result

__all__ = ["optional", "result"]
