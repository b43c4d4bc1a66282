"""
Bidirectional mapping between text labels and categorical keys.

The classifier trains on integer keys; everything the caller sees is decoded
back to the original label strings.
"""

from typing import Dict, Iterable, List


class LabelCodec:
    """
    Text label <-> categorical key codec.

    Keys are assigned 0..n-1 over the sorted unique labels, so the same label
    set always yields the same mapping.

    Example:
        codec = LabelCodec.fit(["dog", "cat", "dog"])
        codec.encode("dog")   # 1
        codec.decode(0)       # "cat"
    """

    def __init__(self, classes: Iterable[str]):
        self._classes: List[str] = list(classes)
        if len(set(self._classes)) != len(self._classes):
            raise ValueError("Duplicate class names in label codec")
        self._keys: Dict[str, int] = {name: idx for idx, name in enumerate(self._classes)}

    @classmethod
    def fit(cls, labels: Iterable[str]) -> "LabelCodec":
        """Build a codec from the labels seen in training data."""
        return cls(sorted(set(labels)))

    @property
    def classes(self) -> List[str]:
        return list(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, label: str) -> bool:
        return label in self._keys

    def encode(self, label: str) -> int:
        try:
            return self._keys[label]
        except KeyError:
            raise KeyError(f"Unknown label: {label!r}") from None

    def decode(self, key: int) -> str:
        key = int(key)
        if not 0 <= key < len(self._classes):
            raise KeyError(f"Unknown categorical key: {key}")
        return self._classes[key]

    def encode_many(self, labels: Iterable[str]) -> List[int]:
        return [self.encode(label) for label in labels]

    def decode_many(self, keys: Iterable[int]) -> List[str]:
        return [self.decode(key) for key in keys]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelCodec):
            return NotImplemented
        return self._classes == other._classes

    def __repr__(self) -> str:
        return f"LabelCodec({self._classes!r})"
