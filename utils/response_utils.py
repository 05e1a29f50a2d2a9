"""
Normalization of the backend's response shapes.

The backend answers in three shapes depending on the endpoint:
    - wrapped:   {"success": true, "data": ...}
    - raw:       [...] or {...}
    - paginated: {"results": [...], "count": N}
Everything here tries each known shape in turn and defaults to empty.
"""

from typing import Any

from models.listing import ListResult


def _is_wrapped(response: Any) -> bool:
    return isinstance(response, dict) and "success" in response and "data" in response


def unwrap_record(response: Any) -> dict:
    """
    Extract a single record from a detail/update response.

    Args:
        response: Decoded JSON body

    Returns:
        The record dict, or {} if the body holds none
    """
    if _is_wrapped(response):
        data = response.get("data") if response.get("success") else None
        return data if isinstance(data, dict) else {}
    if isinstance(response, dict):
        return response
    return {}


def normalize_list_response(response: Any) -> ListResult:
    """
    Extract items and total count from a list response.

    Args:
        response: Decoded JSON body in any of the known shapes

    Returns:
        ListResult; empty when the shape is not recognised
    """
    if _is_wrapped(response):
        if not response.get("success"):
            return ListResult.empty()
        data = response.get("data")
        if isinstance(data, list):
            total = response.get("count") or response.get("total") or len(data)
            return ListResult(items=data, total=int(total))
        if isinstance(data, dict) and isinstance(data.get("results"), list):
            return normalize_list_response(data)
        return ListResult.empty()

    if isinstance(response, list):
        return ListResult(items=response, total=len(response))

    if isinstance(response, dict) and "results" in response:
        items = response.get("results") or []
        if not isinstance(items, list):
            return ListResult.empty()
        total = response.get("count") or len(items)
        return ListResult(items=items, total=int(total))

    return ListResult.empty()
