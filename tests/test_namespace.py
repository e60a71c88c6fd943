"""Tests for namespace and base-URL resolution."""

from __future__ import annotations

import pytest

from bnetapi.exceptions import ConfigurationError
from bnetapi.models import Game, NamespaceScope, Region, Scope
from bnetapi.namespace import base_url, parse_battle_tag, resolve_namespace


class TestResolveNamespace:
    @pytest.mark.parametrize(
        ("scope", "region", "expected"),
        [
            ("dynamic", "us", "dynamic-us"),
            ("static", "eu", "static-eu"),
            ("profile", "kr", "profile-kr"),
        ],
    )
    def test_scope_and_region(self, scope: str, region: str, expected: str) -> None:
        assert resolve_namespace(scope, region) == expected

    def test_classic_infix(self) -> None:
        assert resolve_namespace(NamespaceScope.STATIC, Region.US, classic=True) == (
            "static-classic-us"
        )
        assert resolve_namespace("dynamic", "tw", classic=True) == "dynamic-classic-tw"

    def test_profile_ignores_classic(self) -> None:
        assert resolve_namespace("profile", "eu", classic=True) == "profile-eu"

    def test_unknown_scope_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="namespace scope"):
            resolve_namespace("weekly", "us")

    def test_unknown_region_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="region"):
            resolve_namespace("dynamic", "cn")


class TestBaseUrl:
    def test_game_data(self) -> None:
        assert base_url(Scope.GAME_DATA, Region.EU, Game.WOW) == (
            "https://eu.api.blizzard.com/data/wow"
        )

    def test_profile_scope(self) -> None:
        assert base_url("profile", "us", "wow") == "https://us.api.blizzard.com/profile/wow"

    def test_other_game_and_host(self) -> None:
        assert base_url("game_data", "kr", "d3", host="example.test") == (
            "https://kr.example.test/data/d3"
        )

    def test_unknown_game_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="game"):
            base_url("game_data", "us", "overwatch")


class TestParseBattleTag:
    def test_replaces_hash(self) -> None:
        assert parse_battle_tag("Player#1234") == "Player-1234"

    def test_without_hash(self) -> None:
        assert parse_battle_tag("Player") == "Player"
