from __future__ import annotations

import logging

import pytest

from src.brigade_portal.brigade_portal.core.exceptions import NotMapped
from src.brigade_portal.brigade_portal.members.identity_map import MemberDirectory, MemberIdentityMap
from tests.fakes import FakeMemberRepo, mapping


def test_resolve_both_directions():
    identity = MemberIdentityMap([mapping(1, 45), mapping(2, 46)])

    assert identity.resolve(45) == 1
    assert identity.resolve("46") == 2
    assert identity.resolve(45.0) == 1
    assert identity.local_to_external(1) == 45
    assert identity.local_to_external(99) is None
    assert len(identity) == 2


@pytest.mark.parametrize("external_id", [99, None, "abc", True, 45.9, "45.5", [45]])
def test_unknown_external_id_is_not_mapped(external_id):
    identity = MemberIdentityMap([mapping(1, 45)])

    with pytest.raises(NotMapped):
        identity.resolve(external_id)


def test_inactive_members_are_excluded():
    identity = MemberIdentityMap([mapping(1, 45, active=False)])

    with pytest.raises(NotMapped):
        identity.resolve(45)


def test_external_id_claimed_twice_is_ambiguous(caplog):
    with caplog.at_level(logging.WARNING):
        identity = MemberIdentityMap([mapping(1, 45), mapping(2, 45), mapping(3, 47)])

    with pytest.raises(NotMapped):
        identity.resolve(45)
    assert identity.resolve(47) == 3
    assert "45" in caplog.text


def test_directory_builds_a_fresh_map_per_call():
    repo = FakeMemberRepo({1: [mapping(1, 45)], 2: [mapping(9, 45)]})
    directory = MemberDirectory(repo)

    assert directory.map_of(1).resolve(45) == 1
    assert directory.map_of(2).resolve(45) == 9
    directory.map_of(1)
    assert repo.calls == 3


def test_membership_check_matches_resolve():
    identity = MemberIdentityMap([mapping(1, 45)])

    assert 45 in identity
    assert "45" in identity
    assert 45.5 not in identity
    assert True not in identity
