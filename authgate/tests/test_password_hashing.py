from __future__ import annotations

import pytest

from authgate.application.services.password_hashing import WerkzeugPasswordHasher

FAST_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=FAST_METHOD)


def test_hash_is_salted_and_verifiable(hasher: WerkzeugPasswordHasher) -> None:
    first = hasher.hash("Abc12345!")
    second = hasher.hash("Abc12345!")

    assert first != second
    assert "Abc12345!" not in first
    assert first.startswith("pbkdf2:sha256:1000$")
    assert hasher.verify("Abc12345!", first)
    assert hasher.verify("Abc12345!", second)


def test_wrong_password_fails(hasher: WerkzeugPasswordHasher) -> None:
    digest = hasher.hash("Abc12345!")

    assert not hasher.verify("abc12345!", digest)


@pytest.mark.parametrize("digest", ["", "not-a-digest", "md6:1$salt$abcdef"])
def test_malformed_digest_never_matches(hasher: WerkzeugPasswordHasher, digest: str) -> None:
    assert hasher.verify("Abc12345!", digest) is False


def test_digest_from_other_method_still_verifies(hasher: WerkzeugPasswordHasher) -> None:
    legacy = WerkzeugPasswordHasher(method="pbkdf2:sha256:2000").hash("Abc12345!")

    assert hasher.verify("Abc12345!", legacy)


def test_dummy_hash_uses_configured_method_and_matches_nothing(
    hasher: WerkzeugPasswordHasher,
) -> None:
    assert hasher.dummy_hash.startswith("pbkdf2:sha256:1000$")
    assert not hasher.verify("Abc12345!", hasher.dummy_hash)
