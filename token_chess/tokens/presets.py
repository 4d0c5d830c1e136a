"""Starting token pools the game can be set up with."""

from token_chess.core.exceptions import InvalidPoolError
from token_chess.core.shared_types import Owner, TokenKind

PoolKinds = dict[Owner, list[TokenKind]]

# Three tokens per pool. Neutral bank starts with the queen token nobody owns yet.
STANDARD_POOLS: PoolKinds = {
    Owner.WHITE: [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP],
    Owner.BLACK: [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP],
    Owner.NEUTRAL: [TokenKind.ROOK, TokenKind.ROOK, TokenKind.QUEEN],
}

# Every player owns one token of each kind, the bank only holds minor pieces.
CLASSIC_POOLS: PoolKinds = {
    Owner.WHITE: [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP, TokenKind.QUEEN],
    Owner.BLACK: [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP, TokenKind.QUEEN],
    Owner.NEUTRAL: [TokenKind.KNIGHT, TokenKind.BISHOP],
}

POOL_PRESETS: dict[str, PoolKinds] = {
    "standard": STANDARD_POOLS,
    "classic": CLASSIC_POOLS,
}


def preset_pools(name: str) -> PoolKinds:
    """A fresh copy of the named preset (callers are free to mutate the lists)"""
    if name not in POOL_PRESETS:
        raise InvalidPoolError(
            f"Unknown pool preset {name!r}. Pick one from {','.join(POOL_PRESETS)}"
        )
    return {owner: list(kinds) for owner, kinds in POOL_PRESETS[name].items()}
