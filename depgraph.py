"""
Dependency graph for App Landscape.

Turns applications + interfaces into vis-network node/edge records, overlays a
simulated system failure, and derives `hidden` flags for the status /
criticality filters. Layout and physics stay in the browser (vis-network);
this module only supplies colors, titles and visibility.
"""

from __future__ import annotations
import copy
import logging
from typing import Iterable, List, Optional

from portfolio import CRITICALITIES, STATUSES

log = logging.getLogger(__name__)

STATUS_COLORS = {"healthy": "#22c55e", "warning": "#f59e0b", "error": "#ef4444"}
DEFAULT_COLOR  = "#64748b"
FAILED_COLOR   = "#ef4444"
AFFECTED_COLOR = "#f97316"
BORDER         = "#334155"
BORDER_ACTIVE  = "#0f172a"
FONT_FACE      = "Inter, system-ui, -apple-system, sans-serif"

PHYSICS_EDGE_LIMIT = 100

NETWORK_OPTIONS = {
    "layout": {"improvedLayout": True, "randomSeed": 2},
    "nodes": {
        "shape": "box",
        "margin": {"top": 15, "right": 20, "bottom": 15, "left": 20},
        "widthConstraint": {"minimum": 150, "maximum": 200},
        "font": {"size": 14, "face": FONT_FACE, "align": "center", "color": "#ffffff", "multi": "html"},
        "borderWidth": 2,
        "color": {"border": BORDER, "background": "#4A90E2",
                  "highlight": {"border": BORDER_ACTIVE, "background": "#357ABD"},
                  "hover": {"border": BORDER_ACTIVE, "background": "#357ABD"}},
        "shadow": {"enabled": True, "color": "rgba(0,0,0,0.2)", "size": 10, "x": 5, "y": 5},
    },
    "edges": {
        "arrows": {"to": {"enabled": True, "scaleFactor": 0.7, "type": "arrow"}},
        "smooth": {"enabled": True, "type": "curvedCW", "roundness": 0.2, "forceDirection": "horizontal"},
        "font": {"size": 12, "face": FONT_FACE, "align": "middle", "background": "white",
                 "strokeWidth": 4, "strokeColor": "white"},
        "color": {"color": DEFAULT_COLOR, "highlight": "#475569", "hover": "#475569", "inherit": False},
        "width": 2, "selectionWidth": 3, "hoverWidth": 3,
    },
    "physics": {
        "enabled": True,
        "solver": "forceAtlas2Based",
        "forceAtlas2Based": {"gravitationalConstant": -200, "centralGravity": 0.01, "springLength": 300,
                             "springConstant": 0.05, "damping": 0.4, "avoidOverlap": 1.2},
        "stabilization": {"enabled": True, "iterations": 1000, "updateInterval": 100, "fit": True},
    },
    "interaction": {
        "dragNodes": True, "dragView": True, "zoomView": True, "hover": True, "selectable": True,
        "selectConnectedEdges": True, "navigationButtons": True, "keyboard": True, "zoomSpeed": 0.5,
        "tooltipDelay": 300, "hideEdgesOnDrag": True, "hideEdgesOnZoom": True,
    },
}

# ─── COLORS / SHAPES ───────────────────────────────────────────────────────────
def status_color(status: Optional[str]) -> str:
    return STATUS_COLORS.get(status, DEFAULT_COLOR)

def lifecycle_color(lifecycle: Optional[str]) -> str:
    return {
        "Production":  "#DAF5DC",
        "Legacy":      "#FFE0E0",
        "Development": "#E0F0FF",
        "Sunset":      "#FFE8D9",
        "End of Life": "#FFE0E0",
    }.get(lifecycle, "#F5F5F5")

def criticality_color(criticality: Optional[str]) -> str:
    return {"high": "#ea384c", "medium": "#F97316"}.get((criticality or "").lower(), "#888888")

def node_shape(node_type: Optional[str]) -> str:
    return "diamond" if node_type == "interface_hub" else "box"

def contrast_color(background: str) -> str:
    """Dark text on light backgrounds, white text on dark ones."""
    h = background.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#333333" if luminance > 0.5 else "#ffffff"

def edge_width(criticality: Optional[str]) -> int:
    return {"High": 3, "Medium": 2}.get(criticality, 1)

def truncate_label(label: str, max_length: int = 40) -> str:
    return f"{label[:max_length]}..." if len(label) > max_length else label

def should_disable_physics(edge_count: int) -> bool:
    return edge_count > PHYSICS_EDGE_LIMIT

def network_options(edge_count: int) -> dict:
    opts = copy.deepcopy(NETWORK_OPTIONS)
    if should_disable_physics(edge_count):
        opts["physics"]["enabled"] = False
    return opts

# ─── BUILD ─────────────────────────────────────────────────────────────────────
def _node_color(background: str) -> dict:
    return {"background": background, "border": BORDER,
            "highlight": {"background": background, "border": BORDER_ACTIVE},
            "hover":     {"background": background, "border": BORDER_ACTIVE}}

def _edge_color(red: bool) -> dict:
    if red:
        return {"color": FAILED_COLOR, "highlight": "#dc2626", "hover": "#dc2626"}
    return {"color": DEFAULT_COLOR, "highlight": "#475569", "hover": "#475569"}

def _node(app: dict) -> dict:
    status = app.get("status") or "healthy"
    color = status_color(status)
    title = app["name"]
    if app.get("error_message"):   title += f"\n\nError: {app['error_message']}"
    if app.get("warning_message"): title += f"\n\nWarning: {app['warning_message']}"
    return {
        "id":     app["id"],
        "label":  f"{app['name']}\n({app.get('application_type') or 'Other'})",
        "title":  title,
        "color":  _node_color(color),
        "font":   {"color": contrast_color(color), "size": 14, "face": FONT_FACE, "bold": "bold", "align": "center"},
        "shape":  node_shape("application"),
        "shadow": True,
        "status": status,
        "state":  status,
        "type":   "application",
        "hidden": False,
    }

def _edge(intf: dict, index: int, by_id: dict) -> dict:
    src, dst = by_id[intf["source"]], by_id[intf["target"]]
    in_error = src.get("status") == "error" or dst.get("status") == "error"
    return {
        "id":          intf.get("id") or str(index),
        "from":        intf["source"],
        "to":          intf["target"],
        "label":       intf.get("data") or "",
        "title":       f"{intf.get('description') or ''}\n"
                       f"Protocol: {intf.get('protocol') or ''}\n"
                       f"Criticality: {intf.get('criticality') or ''}\n"
                       f"Data: {intf.get('data') or ''}",
        "color":       _edge_color(in_error),
        "width":       edge_width(intf.get("criticality")),
        "dashes":      in_error,
        "criticality": intf.get("criticality"),
        "protocol":    intf.get("protocol"),
        "state":       "error" if in_error else "normal",
        "hidden":      False,
    }

def build_graph(apps: List[dict], interfaces: List[dict]) -> dict:
    """vis-network nodes/edges. Interfaces with an unknown endpoint are dropped."""
    by_id = {a["id"]: a for a in apps}
    nodes = [_node(a) for a in apps]
    edges = [_edge(i, n, by_id) for n, i in enumerate(interfaces)
             if i.get("source") in by_id and i.get("target") in by_id]
    return {"nodes": nodes, "edges": edges}

# ─── FAILURE SIMULATION ────────────────────────────────────────────────────────
def simulate_failure(graph: dict, system_id: str, message: str = "System failure") -> dict:
    """
    Overlay a failure of system_id on a copy of graph.

    The failing node turns red and takes status `error`, so the status filter
    treats it as failed. Every edge touching it (either direction) turns
    red, and the node at its other end is marked `affected` (orange) while
    keeping its own status. Only direct neighbours are affected.
    """
    out = copy.deepcopy(graph)
    impact = {"failed": None, "message": message, "affected_nodes": [], "affected_edges": []}
    failing = next((n for n in out["nodes"] if n["id"] == system_id), None)
    if failing is None:
        log.warning(f"Failure simulation: unknown system {system_id}")
        out["impact"] = impact
        return out

    failing.update(color=_node_color(FAILED_COLOR), title=f"Error: {message}", state="error", status="error")
    failing["font"] = {**failing.get("font", {}), "color": contrast_color(FAILED_COLOR)}
    impact["failed"] = system_id

    note = f"Affected by {system_id} failure"
    nodes = {n["id"]: n for n in out["nodes"]}
    for e in out["edges"]:
        if system_id not in (e["from"], e["to"]):
            continue
        e.update(color=_edge_color(True), title=note, state="affected")
        impact["affected_edges"].append(e["id"])
        peer = nodes.get(e["to"] if e["from"] == system_id else e["from"])
        if peer is None or peer["id"] == system_id or peer["state"] == "affected":
            continue
        peer.update(color=_node_color(AFFECTED_COLOR), title=note, state="affected")
        peer["font"] = {**peer.get("font", {}), "color": contrast_color(AFFECTED_COLOR)}
        impact["affected_nodes"].append(peer["id"])

    log.info(f"Failure simulation: {system_id} affects {len(impact['affected_nodes'])} systems, "
             f"{len(impact['affected_edges'])} interfaces")
    out["impact"] = impact
    return out

# ─── FILTERS ───────────────────────────────────────────────────────────────────
def apply_filters(graph: dict, statuses: Optional[Iterable[str]] = None,
                  criticalities: Optional[Iterable[str]] = None) -> dict:
    """
    Set `hidden` on nodes whose status and edges whose criticality are not selected.

    Nothing is removed and order is kept, so vis-network can update the
    existing DataSet in place without re-running the layout.
    """
    shown_status = set(STATUSES if statuses is None else statuses)
    shown_crit = set(CRITICALITIES if criticalities is None else criticalities)
    out = dict(graph)
    out["nodes"] = [{**n, "hidden": (n.get("status") or "healthy") not in shown_status} for n in graph["nodes"]]
    out["edges"] = [{**e, "hidden": (e.get("criticality") or "Low") not in shown_crit} for e in graph["edges"]]
    return out
