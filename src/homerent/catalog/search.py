from typing import Any, Iterable, List, Mapping

from ..config.settings import SUGGESTION_LIMIT


def _name(appliance: Mapping[str, Any]) -> str:
    return str(appliance.get('name') or '').lower()


def search(appliances: Iterable[Mapping[str, Any]], term: Any) -> List[Mapping[str, Any]]:
    """Case-insensitive substring match on the appliance name; an empty term keeps all.

    The term is matched as typed, surrounding spaces included.
    """
    needle = str(term or '').lower()
    items = list(appliances or [])
    if not needle:
        return items
    return [a for a in items if needle in _name(a)]


def suggest(appliances: Iterable[Mapping[str, Any]], prefix: Any, limit: int = SUGGESTION_LIMIT) -> List[str]:
    """Names starting with ``prefix`` (case-insensitive), at most ``limit``, catalog order."""
    needle = str(prefix or '').strip().lower()
    if not needle:
        return []
    names = []
    for appliance in appliances or []:
        if _name(appliance).startswith(needle):
            names.append(str(appliance.get('name')))
            if len(names) >= limit:
                break
    return names
