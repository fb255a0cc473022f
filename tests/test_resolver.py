"""
Unit tests for cross-source identity resolution.

These tests verify that:
1. Rows sharing a key in any textual form converge on one asset
2. Keys are checked in strict priority order (MAC > hostname > IP > id)
3. Fields are first-writer-wins and newly learned keys become linkable
4. Linking is non-transitive unless the opt-in merge is requested
5. Resolution is deterministic
"""

import logging

import pytest

from assetlink.models import Source
from assetlink.resolver import IdentityResolver, merge_transitive, resolve_assets


# =============================================================================
# FIXTURES
# =============================================================================

def make_source(source_id: str, rows: list, label: str = None, color: str = "#0B5AA8") -> Source:
    """Helper to create Source objects for testing."""
    return Source(
        id=source_id,
        label=label or source_id.upper(),
        file_name=f"{source_id}.csv",
        rows=rows,
        headers=list(rows[0].keys()) if rows else [],
        color=color,
    )


@pytest.fixture
def cmdb():
    return make_source("cmdb", [
        {"MAC Address": "AA:BB:CC:DD:EE:01", "Hostname": "srv1", "Vendor": "Dell"},
        {"MAC Address": "AA:BB:CC:DD:EE:02", "Hostname": "srv2"},
    ])


@pytest.fixture
def scanner():
    return make_source("scanner", [
        {"mac": "aa-bb-cc-dd-ee-01", "IP": "10.0.0.1", "Vendor": "Dell Inc."},
        {"mac": "", "Computer Name": "ws-9", "IP": "10.0.0.9"},
    ])


# =============================================================================
# CONVERGENCE
# =============================================================================

class TestConvergence:
    """Rows describing the same device resolve to one asset."""

    def test_same_mac_different_formats(self):
        a = make_source("a", [{"MAC": "AA:BB:CC:DD:EE:FF"}])
        b = make_source("b", [{"Physical Address": "aabb.ccdd.eeff"}])

        assets = resolve_assets([a, b])

        assert len(assets) == 1
        assert assets[0].id == "aabbccddeeff"
        assert assets[0].sources == {"a", "b"}
        assert len(assets[0].source_details) == 2

    def test_same_source_twice_counts_once_in_sources(self):
        a = make_source("a", [{"Hostname": "srv1"}, {"Hostname": "SRV1"}])

        assets = resolve_assets([a])

        assert len(assets) == 1
        assert assets[0].sources == {"a"}
        assert len(assets[0].source_details) == 2

    def test_provenance_copies_row_and_source_metadata(self, cmdb):
        assets = resolve_assets([cmdb])
        detail = assets[0].source_details[0]

        assert detail.source_id == "cmdb"
        assert detail.source_label == "CMDB"
        assert detail.source_color == "#0B5AA8"
        assert detail.data == cmdb.rows[0]
        assert detail.data is not cmdb.rows[0]

    def test_end_to_end_hostname_learned_at_creation(self):
        """Asset A registers hostname srv1, so B's hostname-only row merges into it."""
        a = make_source("a", [{"MAC": "AA:BB:CC:DD:EE:01", "Host": "srv1"}])
        b = make_source("b", [{"Hostname": "srv1", "IP": "10.0.0.5"}])

        assets = resolve_assets([a, b])

        assert len(assets) == 1
        asset = assets[0]
        assert asset.sources == {"a", "b"}
        assert asset.mac == "aabbccddee01"
        assert asset.hostname == "srv1"
        assert asset.ip == "10.0.0.5"


# =============================================================================
# ID ASSIGNMENT
# =============================================================================

class TestIdAssignment:

    @pytest.mark.parametrize("row,expected", [
        ({"MAC": "aabbccddee01", "Hostname": "h", "IP": "10.0.0.1", "Serial": "S1"}, "aabbccddee01"),
        ({"Hostname": "H", "IP": "10.0.0.1", "Serial": "S1"}, "h"),
        ({"IP": "10.0.0.1", "Serial": "S1"}, "10.0.0.1"),
        ({"Serial": "S1"}, "S1"),
    ])
    def test_id_follows_priority(self, row, expected):
        assets = resolve_assets([make_source("a", [row])])
        assert assets[0].id == expected

    def test_id_not_changed_by_later_keys(self):
        a = make_source("a", [{"Hostname": "srv1"}])
        b = make_source("b", [{"Hostname": "srv1", "MAC": "aabbccddee01"}])

        assets = resolve_assets([a, b])

        assert assets[0].id == "srv1"
        assert assets[0].mac == "aabbccddee01"


# =============================================================================
# FIRST WRITER WINS
# =============================================================================

class TestFirstWriterWins:

    def test_hostname_learned_then_never_overwritten(self):
        rows = [
            {"MAC": "aabbccddee01"},
            {"MAC": "AA:BB:CC:DD:EE:01", "Hostname": "first"},
            {"MAC": "aa-bb-cc-dd-ee-01", "Hostname": "second"},
        ]
        assets = resolve_assets([make_source("a", rows)])

        assert len(assets) == 1
        assert assets[0].hostname == "first"
        assert len(assets[0].source_details) == 3

    def test_manufacturer_first_writer_wins(self, cmdb, scanner):
        assets = resolve_assets([cmdb, scanner])
        assert assets[0].manufacturer == "Dell"

    def test_learned_key_becomes_linkable(self):
        """An IP learned from row 2 links a row 3 that only carries that IP."""
        rows_a = [{"MAC": "aabbccddee01"}]
        rows_b = [{"MAC": "aabbccddee01", "IP": "10.1.1.1"}]
        rows_c = [{"IP": "10.1.1.1", "Hostname": "late-name"}]

        assets = resolve_assets([
            make_source("a", rows_a),
            make_source("b", rows_b),
            make_source("c", rows_c),
        ])

        assert len(assets) == 1
        assert assets[0].sources == {"a", "b", "c"}
        assert assets[0].hostname == "late-name"

    def test_generic_id_is_not_learned_by_existing_assets(self):
        rows = [
            {"MAC": "aabbccddee01"},
            {"MAC": "aabbccddee01", "Serial": "S1"},
            {"Serial": "S1"},
        ]
        assets = resolve_assets([make_source("a", rows)])

        assert len(assets) == 2
        assert assets[1].id == "S1"


# =============================================================================
# PRIORITY AND NON-TRANSITIVE LINKING
# =============================================================================

class TestPriorityOrdering:

    def test_mac_match_beats_hostname_match(self):
        """Row hits cluster A by MAC and cluster B by hostname; joins A only."""
        a = make_source("a", [{"MAC": "aabbccddee01"}])
        b = make_source("b", [{"Hostname": "h1"}])
        c = make_source("c", [{"MAC": "aabbccddee01", "Hostname": "h1"}])
        d = make_source("d", [{"Hostname": "h1"}])

        assets = resolve_assets([a, b, c, d])

        assert len(assets) == 2
        mac_asset, host_asset = assets
        # Once A learns h1 the hostname index points at A, so d follows it
        assert mac_asset.sources == {"a", "c", "d"}
        assert host_asset.sources == {"b"}
        # A learns h1 as a field value; B keeps its own copy
        assert mac_asset.hostname == "h1"
        assert host_asset.hostname == "h1"

    def test_hostname_beats_ip(self):
        a = make_source("a", [{"Hostname": "h1"}])
        b = make_source("b", [{"IP": "10.0.0.7"}])
        c = make_source("c", [{"Hostname": "h1", "IP": "10.0.0.7"}])

        assets = resolve_assets([a, b, c])

        assert assets[0].sources == {"a", "c"}
        assert assets[1].sources == {"b"}

    def test_generic_id_links_when_nothing_else_does(self):
        a = make_source("a", [{"Asset Tag": "T-100", "Hostname": "x"}])
        b = make_source("b", [{"Asset Tag": "T-100"}])

        assets = resolve_assets([a, b])

        assert len(assets) == 1
        assert assets[0].sources == {"a", "b"}


# =============================================================================
# DROPPED ROWS
# =============================================================================

class TestNoSignalRows:

    def test_row_without_identity_is_dropped(self):
        rows = [
            {"MAC": "", "Hostname": "unknown", "IP": "0.0.0.0", "Vendor": "HP"},
            {"Owner": "bob"},
            {"Hostname": "keep-me"},
        ]
        source = make_source("a", rows)
        result = IdentityResolver().resolve([source])

        assert len(result.assets) == 1
        assert result.rows_processed == 3
        assert result.rows_dropped == 2
        assert result.rows_linked == 1
        all_rows = [d.data for asset in result.assets for d in asset.source_details]
        assert rows[0] not in all_rows
        assert rows[1] not in all_rows

    def test_no_sources(self):
        assert resolve_assets([]) == []


# =============================================================================
# DETERMINISM
# =============================================================================

class TestDeterminism:

    def test_repeat_runs_identical(self, cmdb, scanner):
        first = resolve_assets([cmdb, scanner])
        second = resolve_assets([cmdb, scanner])

        assert [a.to_dict() for a in first] == [a.to_dict() for a in second]

    def test_source_order_controls_ids(self):
        a = make_source("a", [{"Hostname": "srv1"}])
        b = make_source("b", [{"Hostname": "srv1", "MAC": "aabbccddee01"}])

        assert resolve_assets([a, b])[0].id == "srv1"
        assert resolve_assets([b, a])[0].id == "aabbccddee01"

    def test_resolver_holds_no_state_between_runs(self, cmdb):
        resolver = IdentityResolver()
        resolver.resolve([cmdb])
        result = resolver.resolve([cmdb])

        assert len(result.assets) == 2
        assert all(len(asset.source_details) == 1 for asset in result.assets)


# =============================================================================
# OPT-IN TRANSITIVE MERGE
# =============================================================================

class TestTransitiveMerge:

    def test_bridging_row_merges_clusters(self):
        a = make_source("a", [{"MAC": "aabbccddee01"}])
        b = make_source("b", [{"Hostname": "h1", "IP": "10.0.0.2"}])
        c = make_source("c", [{"MAC": "aabbccddee01", "Hostname": "h1"}])

        assets = resolve_assets([a, b, c], transitive=True)

        assert len(assets) == 1
        merged = assets[0]
        assert merged.id == "aabbccddee01"
        assert merged.sources == {"a", "b", "c"}
        assert merged.hostname == "h1"
        assert merged.ip == "10.0.0.2"
        assert [d.source_id for d in merged.source_details] == ["a", "c", "b"]

    def test_chain_of_bridges(self):
        rows = [
            {"MAC": "aabbccddee01"},
            {"Hostname": "h1"},
            {"IP": "10.0.0.3"},
            {"MAC": "aabbccddee01", "Hostname": "h1"},
            {"Hostname": "h1", "IP": "10.0.0.3"},
        ]
        non_transitive = resolve_assets([make_source("a", rows)])
        transitive = resolve_assets([make_source("a", rows)], transitive=True)

        assert len(non_transitive) == 3
        assert len(transitive) == 1
        assert len(transitive[0].source_details) == 5

    def test_unrelated_assets_untouched(self, cmdb, scanner):
        plain = resolve_assets([cmdb, scanner])
        merged = merge_transitive(plain)

        assert [a.to_dict() for a in merged] == [a.to_dict() for a in plain]
        assert merged[0] is plain[0]

    def test_default_is_non_transitive(self):
        a = make_source("a", [{"MAC": "aabbccddee01"}])
        b = make_source("b", [{"Hostname": "h1"}])
        c = make_source("c", [{"MAC": "aabbccddee01", "Hostname": "h1"}])

        assert len(resolve_assets([a, b, c])) == 2


# =============================================================================
# LOGGING
# =============================================================================

class TestDebugLogging:

    def test_decisions_logged_when_debug(self, cmdb, scanner, caplog):
        with caplog.at_level(logging.DEBUG, logger="assetlink.resolver"):
            resolve_assets([cmdb, scanner], debug=True)

        messages = [record.getMessage() for record in caplog.records]
        assert any("Asset created" in m for m in messages)
        assert any("linked to asset" in m for m in messages)
        assert any("learned ip='10.0.0.1'" in m for m in messages)

    def test_quiet_without_debug(self, cmdb, caplog):
        with caplog.at_level(logging.DEBUG, logger="assetlink.resolver"):
            resolve_assets([cmdb])

        assert not any("Asset created" in r.getMessage() for r in caplog.records)
