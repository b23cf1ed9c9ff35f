"""Fan-out over the policy contracts and merge the replies."""

from collections.abc import Iterable, Mapping
from typing import Any, Dict, Set

from paranoia_app.core.logging_config import get_logger

from .. import signals

logger = get_logger('paranoia')

# --- Constants: Categories ---
HIDDEN_MODULES = 'hidden_modules'
HIDDEN_PERMISSIONS = 'hidden_permissions'
HIDDEN_PATHS = 'hidden_paths'
DISABLED_MODULES = 'disabled_modules'
RISKY_FORMS = 'risky_forms'

CONTRACTS = {
    HIDDEN_MODULES: signals.hide_modules,
    HIDDEN_PERMISSIONS: signals.hide_permissions,
    HIDDEN_PATHS: signals.hide_paths,
    DISABLED_MODULES: signals.disable_modules,
    RISKY_FORMS: signals.risky_forms,
}

CATEGORIES = tuple(CONTRACTS)


def normalize_path(path: str) -> str:
    path = '/' + path.strip().strip('/')
    return path


def _normalize_reply(reply: Any) -> Set[str]:
    """Turn one receiver reply into a set of identifiers.

    Mappings contribute their keys, other iterables their items and a bare
    string itself. Blank strings are dropped; any non-string item makes the
    whole reply malformed.
    """
    if reply is None:
        return set()
    if isinstance(reply, str):
        items = [reply]
    elif isinstance(reply, Mapping):
        items = list(reply.keys())
    elif isinstance(reply, Iterable):
        items = list(reply)
    else:
        raise TypeError(f"expected a mapping or an iterable, got {type(reply).__name__}")
    malformed = [item for item in items if not isinstance(item, str)]
    if malformed:
        raise TypeError(f"expected string identifiers, got {malformed!r}")
    return {item.strip() for item in items if item.strip()}


def collect(category: str, sender: Any = None) -> Set[str]:
    """Ask every collaborator implementing ``category`` and union the replies.

    A collaborator that raises or returns malformed data is skipped.
    """
    signal = CONTRACTS.get(category)
    if signal is None:
        raise ValueError(f"Unknown policy category '{category}'")

    declared: Set[str] = set()
    for receiver in list(signal.receivers_for(sender)):
        name = getattr(receiver, '__qualname__', repr(receiver))
        try:
            declared |= _normalize_reply(receiver(sender))
        except Exception as e:
            logger.warning("Skipped %s declaration from %s: %s", category, name, e)

    if category == HIDDEN_PATHS:
        declared = {normalize_path(path) for path in declared}
    return declared


def collect_all(sender: Any = None) -> Dict[str, Set[str]]:
    return {category: collect(category, sender) for category in CATEGORIES}
