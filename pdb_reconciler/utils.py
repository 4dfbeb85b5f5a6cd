"""Utility functions for object serialization and comparison."""

import json
import re
from typing import Any, Dict, Optional

from kubernetes import client

_api_client: Optional[client.ApiClient] = None


def sanitize(obj: Any) -> Any:
    """
    Convert a Kubernetes model into plain JSON-ready data.

    Keys use the API field names (e.g. "minAvailable") and None
    values are dropped, so two objects describing the same state
    sanitize to equal dicts.
    """
    global _api_client
    if _api_client is None:
        _api_client = client.ApiClient()
    return _api_client.sanitize_for_serialization(obj)


def attribute_name(api_name: str) -> str:
    """
    Map an API field name to the model attribute holding it.

    Examples:
        "minAvailable" -> "min_available"
        "unhealthyPodEvictionPolicy" -> "unhealthy_pod_eviction_policy"
    """
    return re.sub(r"(?<!^)(?=[A-Z])", "_", api_name).lower()


def serialize_spec(spec: Any) -> str:
    """Serialize a spec to canonical JSON for an annotation."""
    return json.dumps(sanitize(spec), sort_keys=True, separators=(",", ":"), allow_nan=False)


def deserialize_spec(spec_str: Optional[str]) -> Dict:
    """Deserialize a spec JSON string from an annotation."""
    try:
        spec = json.loads(spec_str)
    except (json.JSONDecodeError, TypeError):
        return {}
    return spec if isinstance(spec, dict) else {}
