"""
Tests for registry data types.
"""

from datetime import datetime, timezone

import pytest

from solutionkit.core.exceptions import RegistryTransportError
from solutionkit.packages.models import (
    Package,
    PackageEnsureStatus,
    PackageVersion,
    format_size,
    version_key,
)


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024**4, "3072.0 GB"),
        ],
    )
    def test_format_size(self, size, expected):
        assert format_size(size) == expected


class TestVersionKey:
    def test_numeric_ordering(self):
        assert sorted(["1.10.0", "1.9.2", "1.2"], key=version_key) == ["1.2", "1.9.2", "1.10.0"]

    def test_unparseable_sorts_below_valid(self):
        versions = ["2024-arm-rel", "1.0"]

        assert sorted(versions, key=version_key) == ["2024-arm-rel", "1.0"]


class TestPackage:
    def test_from_dict_defaults(self):
        package = Package.from_dict({"name": "catch2"})

        assert package.kind == "package"
        assert not package.is_toolchain

    def test_from_dict_missing_name(self):
        with pytest.raises(RegistryTransportError):
            Package.from_dict({"kind": "toolchain"})


class TestPackageVersion:
    def test_from_dict_parses_utc(self):
        version = PackageVersion.from_dict(
            {"name": "gcc", "version": "13.2.1", "size": 1536, "published": "2024-06-01T12:30:00Z"}
        )

        assert version.published == datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)
        assert version.summary() == "gcc, 13.2.1, 1.5 KB, 2024-06-01 12:30:00 UTC"

    def test_naive_timestamp_assumed_utc(self):
        version = PackageVersion.from_dict(
            {"name": "gcc", "version": "1", "published": "2024-06-01T12:30:00"}
        )

        assert version.published.tzinfo is timezone.utc

    def test_bad_timestamp(self):
        with pytest.raises(RegistryTransportError):
            PackageVersion.from_dict({"name": "gcc", "version": "1", "published": "yesterday"})


class TestPackageEnsureStatus:
    def test_ok(self):
        assert PackageEnsureStatus.FOUND.ok
        assert PackageEnsureStatus.INSTALLED.ok
        assert not PackageEnsureStatus.NOT_FOUND.ok
        assert not PackageEnsureStatus.FAILED.ok
