"""
Settings, read once from the environment.

Nothing here is persisted: the default database lives in memory for as long as the process does.
"""

import os

from token_chess.core.exceptions import ConfigurationError
from token_chess.core.shared_types import RequirementPolicy


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def requirement_policy_from_env(
    name: str, default: RequirementPolicy = RequirementPolicy.UNION_ALL_POOLS
) -> RequirementPolicy:
    value = os.environ.get(name, default.value).strip()
    try:
        return RequirementPolicy(value)
    except ValueError as error:
        raise ConfigurationError(
            f"{name}={value!r} is not a requirement policy. \nPick one from {','.join(RequirementPolicy)}"
        ) from error


DATABASE_URL = os.environ.get("TOKEN_CHESS_DATABASE_URL", "sqlite:///:memory:")
SQL_ECHO = _flag("TOKEN_CHESS_SQL_ECHO")

# Which starting pools a new game gets when the request does not say (see token_chess/tokens/presets.py)
DEFAULT_POOL_PRESET = os.environ.get("TOKEN_CHESS_POOL_PRESET", "standard")

# How the set of token-gated piece kinds is derived. See DESIGN.md (kinds only the neutral pool holds).
DEFAULT_REQUIREMENT_POLICY = requirement_policy_from_env("TOKEN_CHESS_REQUIREMENT_POLICY")
