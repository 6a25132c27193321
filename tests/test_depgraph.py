from __future__ import annotations

import copy

import pytest

import depgraph
from seed_data import SAMPLE_APPLICATIONS, SAMPLE_INTERFACES


@pytest.fixture
def graph():
    return depgraph.build_graph(SAMPLE_APPLICATIONS, SAMPLE_INTERFACES)


def _node(graph, node_id):
    return next(n for n in graph["nodes"] if n["id"] == node_id)


def _edge(graph, edge_id):
    return next(e for e in graph["edges"] if e["id"] == edge_id)


def test_build_graph_nodes(graph):
    assert [n["id"] for n in graph["nodes"]] == ["ERP", "MES", "LIMS", "QMS", "DMS", "SUP"]
    mes = _node(graph, "MES")
    assert mes["label"] == "Siemens SIMATIC IT\n(MES)"
    assert mes["color"]["background"] == "#ef4444"
    assert mes["state"] == "error"
    assert "Error: Database connection timeout" in mes["title"]
    assert "Warning: Security update required" in _node(graph, "QMS")["title"]
    assert _node(graph, "ERP")["font"]["color"] == "#333333"
    assert all(n["hidden"] is False for n in graph["nodes"])


def test_build_graph_edges(graph):
    assert len(graph["edges"]) == 11
    dashed = sorted(e["id"] for e in graph["edges"] if e["dashes"])
    assert dashed == ["INT001", "INT002", "INT003", "INT008"]
    assert _edge(graph, "INT001")["color"]["color"] == "#ef4444"
    assert _edge(graph, "INT004")["color"]["color"] == "#64748b"
    assert _edge(graph, "INT004")["state"] == "normal"
    assert (_edge(graph, "INT001")["width"], _edge(graph, "INT004")["width"], _edge(graph, "INT007")["width"]) == (3, 2, 1)
    intf = _edge(graph, "INT005")
    assert intf["from"] == "QMS" and intf["to"] == "DMS"
    assert intf["label"] == "GMP Documents"
    assert "Protocol: CMIS / WebDAV" in intf["title"]


def test_build_graph_drops_dangling_interfaces_and_falls_back_to_index_id():
    apps = [{"id": "A", "name": "A"}, {"id": "B", "name": "B"}]
    interfaces = [
        {"id": "X", "source": "A", "target": "ghost", "criticality": "High"},
        {"source": "A", "target": "B", "criticality": "Low"},
    ]
    graph = depgraph.build_graph(apps, interfaces)
    assert [e["id"] for e in graph["edges"]] == ["1"]
    assert graph["nodes"][0]["status"] == "healthy"
    assert graph["nodes"][0]["label"] == "A\n(Other)"


def test_simulate_failure_marks_failed_and_direct_neighbours(graph):
    failed = depgraph.simulate_failure(graph, "LIMS", "Disk full")
    impact = failed["impact"]
    assert impact["failed"] == "LIMS"
    assert impact["affected_edges"] == ["INT002", "INT006", "INT009"]
    assert impact["affected_nodes"] == ["MES", "QMS", "SUP"]

    lims = _node(failed, "LIMS")
    assert lims["state"] == "error"
    assert lims["title"] == "Error: Disk full"
    assert lims["color"]["background"] == "#ef4444"
    for peer in ("MES", "QMS", "SUP"):
        node = _node(failed, peer)
        assert node["state"] == "affected"
        assert node["color"]["background"] == "#f97316"
        assert node["title"] == "Affected by LIMS failure"
    assert _edge(failed, "INT006")["title"] == "Affected by LIMS failure"
    assert _edge(failed, "INT006")["color"]["color"] == "#ef4444"
    # two hops away stays as it was
    assert _node(failed, "ERP")["state"] == "healthy"
    assert _edge(failed, "INT004")["state"] == "normal"


def test_simulate_failure_counts_each_neighbour_once(graph):
    impact = depgraph.simulate_failure(graph, "MES")["impact"]
    assert impact["affected_edges"] == ["INT001", "INT002", "INT003", "INT008"]
    assert impact["affected_nodes"] == ["ERP", "LIMS", "SUP"]


def test_simulate_failure_does_not_mutate_input(graph):
    before = copy.deepcopy(graph)
    depgraph.simulate_failure(graph, "ERP")
    assert graph == before


def test_simulate_failure_unknown_system(graph):
    failed = depgraph.simulate_failure(graph, "NOPE")
    assert failed["impact"]["failed"] is None
    assert failed["impact"]["affected_nodes"] == []
    assert failed["nodes"] == graph["nodes"]
    assert failed["edges"] == graph["edges"]


def test_apply_filters_hides_without_removing(graph):
    filtered = depgraph.apply_filters(graph, statuses=["healthy"], criticalities=["High"])
    assert [n["id"] for n in filtered["nodes"]] == [n["id"] for n in graph["nodes"]]
    assert [e["id"] for e in filtered["edges"]] == [e["id"] for e in graph["edges"]]
    hidden_nodes = {n["id"] for n in filtered["nodes"] if n["hidden"]}
    assert hidden_nodes == {"MES", "QMS"}
    shown_edges = {e["id"] for e in filtered["edges"] if not e["hidden"]}
    assert shown_edges == {"INT001", "INT002", "INT003", "INT006"}
    assert all(n["hidden"] is False for n in graph["nodes"])


def test_apply_filters_defaults_show_everything(graph):
    filtered = depgraph.apply_filters(graph)
    assert not any(n["hidden"] for n in filtered["nodes"])
    assert not any(e["hidden"] for e in filtered["edges"])


def test_apply_filters_empty_selection_hides_everything(graph):
    filtered = depgraph.apply_filters(graph, statuses=[], criticalities=[])
    assert all(n["hidden"] for n in filtered["nodes"])
    assert all(e["hidden"] for e in filtered["edges"])


def test_apply_filters_missing_values_use_defaults():
    graph = {"nodes": [{"id": "A"}], "edges": [{"id": "e"}]}
    filtered = depgraph.apply_filters(graph, statuses=["healthy"], criticalities=["Low"])
    assert filtered["nodes"][0]["hidden"] is False
    assert filtered["edges"][0]["hidden"] is False


def test_contrast_color():
    assert depgraph.contrast_color("#22c55e") == "#333333"
    assert depgraph.contrast_color("#ef4444") == "#ffffff"
    assert depgraph.contrast_color("#ffffff") == "#333333"
    assert depgraph.contrast_color("000000") == "#ffffff"


def test_palette_helpers():
    assert depgraph.criticality_color("HIGH") == "#ea384c"
    assert depgraph.criticality_color("medium") == "#F97316"
    assert depgraph.criticality_color(None) == "#888888"
    assert depgraph.lifecycle_color("Development") == "#E0F0FF"
    assert depgraph.lifecycle_color("Planned") == "#F5F5F5"
    assert depgraph.node_shape("interface_hub") == "diamond"
    assert depgraph.node_shape("application") == "box"
    assert depgraph.status_color("unknown") == "#64748b"


def test_network_options_disable_physics_for_large_graphs():
    assert depgraph.network_options(100)["physics"]["enabled"] is True
    assert depgraph.network_options(101)["physics"]["enabled"] is False
    assert depgraph.NETWORK_OPTIONS["physics"]["enabled"] is True


def test_truncate_label():
    assert depgraph.truncate_label("short") == "short"
    assert depgraph.truncate_label("x" * 41) == "x" * 40 + "..."
    assert depgraph.truncate_label("abcdef", 3) == "abc..."


def test_failed_node_follows_the_error_status_filter(graph):
    failed = depgraph.simulate_failure(graph, "LIMS")
    assert _node(failed, "LIMS")["status"] == "error"
    assert _node(failed, "MES")["status"] == "error"
    assert _node(failed, "QMS")["status"] == "warning"

    only_errors = depgraph.apply_filters(failed, statuses=["error"])
    shown = {n["id"] for n in only_errors["nodes"] if not n["hidden"]}
    assert shown == {"LIMS", "MES"}
