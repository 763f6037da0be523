"""
tests/test_classifier.py

Filename classification rules: keyword match, priority, default.
"""

from __future__ import annotations

import pytest

from analytics.classifier import Category, FileDescriptor, classify, classify_files


class TestClassify:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("biometric_jan.csv", Category.BIOMETRIC),
            ("BIOMETRIC_UPDATES.CSV", Category.BIOMETRIC),
            ("state_Demographic_2025.csv", Category.DEMOGRAPHIC),
            ("enrollment_feb.csv", Category.ENROLLMENT),
            ("anything.csv", Category.ENROLLMENT),
            ("", Category.ENROLLMENT),
        ],
    )
    def test_keyword_rules(self, name: str, expected: Category) -> None:
        assert classify(name) is expected

    def test_biometric_wins_over_demographic(self) -> None:
        assert classify("demographic_and_biometric.csv") is Category.BIOMETRIC
        assert classify("biometric_demographic.csv") is Category.BIOMETRIC

    def test_idempotent(self) -> None:
        name = "Demographic-Feb.csv"
        assert {classify(name) for _ in range(5)} == {Category.DEMOGRAPHIC}


class TestClassifyFiles:
    def test_preserves_order(self, mixed_files: list[FileDescriptor]) -> None:
        assert classify_files(mixed_files) == [
            Category.BIOMETRIC,
            Category.DEMOGRAPHIC,
            Category.ENROLLMENT,
        ]

    def test_empty_input(self) -> None:
        assert classify_files([]) == []

    def test_size_is_ignored(self) -> None:
        files = [FileDescriptor("biometric.csv", 0), FileDescriptor("biometric.csv", 10**9)]
        assert classify_files(files) == [Category.BIOMETRIC, Category.BIOMETRIC]
