# ============================================================================
# SCOPE: APPLICATION LAYER (Shared)
# Description: Utility for extracting data from loosely shaped payloads
# ============================================================================
"""Response extraction utility.

The service is not consistent about envelopes: list endpoints sometimes
return a bare array and sometimes wrap it (``{"appointments": [...]}``,
``{"items": [...]}``). These helpers normalize that before the payload is
handed to a pydantic model.
"""

from typing import Any


class ResponseExtractor:
    """Utility for extracting data from ExternalResponse payloads consistently.

    Example:
        >>> data = ResponseExtractor.as_dict(response.data)
    """

    @staticmethod
    def as_dict(data: Any) -> dict[str, Any]:
        """Extract a dictionary from response data.

        - If data is dict: returns it directly
        - If data is list: returns first item if dict, else empty dict
        - Otherwise: returns empty dict
        """
        if isinstance(data, dict):
            return data
        if isinstance(data, list) and data:
            first_item = data[0]
            return first_item if isinstance(first_item, dict) else {}
        return {}

    @staticmethod
    def extract_items(data: Any, *possible_keys: str) -> list[dict[str, Any]]:
        """Extract a list of items from a bare or wrapped list payload.

        Args:
            data: Response data (dict or list).
            *possible_keys: Keys that might contain the list.

        Returns:
            List of dictionaries. An empty wrapper yields an empty list.

        Example:
            >>> extract_items({"appointments": [{"id": "a1"}]}, "appointments", "items")
            [{"id": "a1"}]
        """
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]

        if isinstance(data, dict):
            for key in possible_keys:
                if key in data:
                    value = data[key]
                    if isinstance(value, list):
                        return [item for item in value if isinstance(item, dict)]
                    if isinstance(value, dict):
                        return [value]
                    return []
            return [data] if data else []

        return []
