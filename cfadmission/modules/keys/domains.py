"""Domain overlap rule: one domain may not be a dot-aligned suffix of another."""

from typing import List


def _labels(domain: str) -> List[str]:
    return domain.split(".")


def domains_overlap(first: str, second: str) -> bool:
    """
    Check whether two domains collide.

    The shorter label sequence is aligned to the tail of the longer one and
    compared label by label, so "foo.example.com" overlaps "example.com" but
    "ample.com" does not.
    """
    first_labels = _labels(first)
    second_labels = _labels(second)

    if len(first_labels) < len(second_labels):
        first_labels, second_labels = second_labels, first_labels

    offset = len(first_labels) - len(second_labels)
    return all(
        first_labels[offset + i] == label for i, label in enumerate(second_labels)
    )
