"""
JSON export of extracted tokens as word box records.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from wordboxes.extraction.models import Token


@dataclass
class WordBox:
    """One exported record: a label and its box in points."""

    word: str
    x: float
    y: float
    width: float
    height: float
    kind: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_token(cls, token: Token, include_kind: bool = False) -> "WordBox":
        box = cls(
            word=token.label,
            x=token.bbox.x,
            y=token.bbox.y,
            width=token.bbox.width,
            height=token.bbox.height,
        )
        if include_kind:
            box.kind = token.kind.value
            box.scope = token.scope
        return box

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.kind is None:
            data.pop("kind")
        if self.scope is None:
            data.pop("scope")
        return data


def tokens_to_records(tokens: Iterable[Token], include_kind: bool = False) -> List[dict]:
    return [WordBox.from_token(t, include_kind).to_dict() for t in tokens]


def tokens_to_json(tokens: Iterable[Token], include_kind: bool = False) -> str:
    """Serialize *tokens* as a pretty-printed JSON array."""
    return json.dumps(
        tokens_to_records(tokens, include_kind), indent=2, ensure_ascii=False
    )


def write_json(
    tokens: Iterable[Token],
    path: Union[str, Path],
    include_kind: bool = False,
) -> Path:
    """Write *tokens* to *path* as JSON, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(tokens_to_json(tokens, include_kind), encoding="utf-8")
    return out
