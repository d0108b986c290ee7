"""Deterministic row ids used to spot duplicate rows across fetches."""

import hashlib
from typing import Mapping


def labels_string(labels: Mapping[str, str]) -> str:
    """Serialize labels as sorted `key="value"` pairs with no separator."""
    return "".join(sorted(f'{key}="{value}"' for key, value in labels.items()))


def compute_id(labels: Mapping[str, str], nanos: str, line: str) -> str:
    """MD5 hex digest over timestamp, serialized labels and line text."""
    return digest(nanos, labels_string(labels), line)


def digest(nanos: str, serialized_labels: str, line: str) -> str:
    payload = f"{nanos}_{serialized_labels}_{line}"
    return hashlib.md5(payload.encode("utf-8", errors="surrogatepass"), usedforsecurity=False).hexdigest()
