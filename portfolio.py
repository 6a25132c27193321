"""
Portfolio arithmetic for App Landscape: risk tiers, KPIs, table filtering and sorting.

Pure functions over plain application dicts; server.py and depgraph.py build on these.
"""

from __future__ import annotations
import math
from typing import Dict, Iterable, List, Optional, Set, Tuple

# ─── VOCABULARY ────────────────────────────────────────────────────────────────
LIFECYCLES    = ("Development", "Production", "Legacy", "Sunset", "End of Life", "Planned")
STATUSES      = ("healthy", "warning", "error")
CRITICALITIES = ("High", "Medium", "Low")
RISK_LEVELS   = ("high", "medium", "low")

APPLICATION_TYPES = {
    "ERP":  "Enterprise Resource Planning (ERP)",
    "CRM":  "Customer Relationship Management (CRM)",
    "MES":  "Manufacturing Execution System (MES)",
    "LIMS": "Laboratory Information Management System (LIMS)",
    "QMS":  "Quality Management System (QMS)",
    "DMS":  "Document Management System (DMS)",
    "PLM":  "Product Lifecycle Management (PLM)",
    "SCM":  "Supply Chain Management (SCM)",
    "BPM":  "Business Process Management (BPM)",
    "BI":   "Business Intelligence (BI)",
    "MDM":  "Master Data Management (MDM)",
    "OTHER": "Other",
}

SORT_FIELDS    = ("name", "owner", "business_capability", "lifecycle", "cost_annual", "risk_score")
NUMERIC_FIELDS = ("cost_annual", "risk_score")

HIGH_RISK_ABOVE = 70
MEDIUM_RISK_FROM = 40

# Demo series shown on the "System Health Trend" chart.
RISK_TREND = [
    {"month": "Jul 2024", "averageRisk": 45},
    {"month": "Aug 2024", "averageRisk": 62},
    {"month": "Sep 2024", "averageRisk": 70},
    {"month": "Oct 2024", "averageRisk": 65},
    {"month": "Nov 2024", "averageRisk": 60},
    {"month": "Dec 2024", "averageRisk": 58},
    {"month": "Jan 2025", "averageRisk": 55},
    {"month": "Feb 2025", "averageRisk": 48},
    {"month": "Mar 2025", "averageRisk": 40},
    {"month": "Apr 2025", "averageRisk": 35},
    {"month": "May 2025", "averageRisk": 32},
    {"month": "Jun 2025", "averageRisk": 30},
]

# ─── RISK ──────────────────────────────────────────────────────────────────────
def risk_level(score) -> str:
    """>70 high, 40–70 medium, <40 low."""
    if score > HIGH_RISK_ABOVE: return "high"
    if score >= MEDIUM_RISK_FROM: return "medium"
    return "low"

def risk_color(level: str) -> str:
    return {"high": "#ea384c", "medium": "#FEC6A1", "low": "#F2FCE2"}.get(level, "#F5F5F5")

def risk_text(level: str) -> str:
    return {"high": "High Risk", "medium": "Medium Risk", "low": "Low Risk"}.get(level, "Unknown")

def with_risk(app: dict) -> dict:
    """Copy of app with the derived risk fields and formatted cost attached."""
    level = risk_level(app.get("risk_score") or 0)
    return {**app,
            "risk_level":   level,
            "risk_text":    risk_text(level),
            "risk_color":   risk_color(level),
            "cost_display": format_currency(app.get("cost_annual") or 0)}

# ─── KPI ───────────────────────────────────────────────────────────────────────
def calculate_kpis(apps: List[dict]) -> dict:
    levels = [risk_level(a.get("risk_score") or 0) for a in apps]
    lifecycles: Dict[str, int] = {}
    for a in apps:
        lifecycles[a.get("lifecycle")] = lifecycles.get(a.get("lifecycle"), 0) + 1
    return {
        "total_apps":             len(apps),
        "total_cost":             sum(a.get("cost_annual") or 0 for a in apps),
        "high_risk_apps":         levels.count("high"),
        "medium_risk_apps":       levels.count("medium"),
        "low_risk_apps":          levels.count("low"),
        "lifecycles":             lifecycles,
        "business_capabilities":  business_domains(apps),
    }

def business_domains(apps: Iterable[dict]) -> List[str]:
    # first-seen order, like the domain dropdown
    return list(dict.fromkeys(a.get("business_capability") for a in apps))

def format_currency(amount) -> str:
    """de-DE EUR without decimals: 420000 -> '420.000 €'."""
    rounded = int(math.floor(abs(amount) + 0.5))
    digits = f"{rounded:,}".replace(",", ".")
    return f"{'-' if amount < 0 and rounded else ''}{digits} €"

# ─── TABLE ─────────────────────────────────────────────────────────────────────
def filter_applications(apps: List[dict], search: Optional[str] = None,
                        domain: Optional[str] = None, risk: Optional[str] = None) -> List[dict]:
    if risk and risk != "all" and risk not in RISK_LEVELS:
        raise ValueError(f"Invalid risk filter '{risk}'. Use one of: all, {', '.join(RISK_LEVELS)}")
    term = (search or "").lower()
    out = []
    for a in apps:
        if term and not any(term in (a.get(f) or "").lower() for f in ("name", "owner", "stack")):
            continue
        if domain and domain != "all" and a.get("business_capability") != domain:
            continue
        if risk and risk != "all" and risk_level(a.get("risk_score") or 0) != risk:
            continue
        out.append(a)
    return out

def sort_applications(apps: List[dict], field: str = "name", order: str = "asc") -> List[dict]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Invalid sort field '{field}'. Use one of: {', '.join(SORT_FIELDS)}")
    if order not in ("asc", "desc"):
        raise ValueError(f"Invalid sort order '{order}'. Use 'asc' or 'desc'")
    if field in NUMERIC_FIELDS:
        key = lambda a: a.get(field) or 0
    else:
        key = lambda a: str(a.get(field) or "").lower()
    return sorted(apps, key=key, reverse=(order == "desc"))

# ─── INTERFACES ────────────────────────────────────────────────────────────────
def split_interfaces(app_id: str, interfaces: Iterable[dict]) -> Tuple[List[dict], List[dict]]:
    """(inbound, outbound) interfaces of app_id."""
    inbound, outbound = [], []
    for i in interfaces:
        if i.get("target") == app_id: inbound.append(i)
        if i.get("source") == app_id: outbound.append(i)
    return inbound, outbound

def related_application_ids(app_id: str, interfaces: Iterable[dict]) -> Set[str]:
    ids = set()
    for i in interfaces:
        if i.get("source") == app_id:   ids.add(i.get("target"))
        elif i.get("target") == app_id: ids.add(i.get("source"))
    return ids

# ─── LANDSCAPE ANALYSIS ────────────────────────────────────────────────────────
def primary_technology(stack: Optional[str]) -> str:
    return (stack or "").split(",")[0].strip()

def landscape_metrics(apps: List[dict], domain: Optional[str] = None) -> dict:
    """Data behind the three landscape charts: risk bars, health trend, tech-vs-risk bubbles."""
    scoped = filter_applications(apps, domain=domain)
    ranked = sorted(scoped, key=lambda a: a.get("risk_score") or 0, reverse=True)
    return {
        "risk_ranking": [
            {"id": a["id"], "name": a.get("name"), "risk_score": a.get("risk_score"),
             "stack": a.get("stack"), "operating_system": a.get("operating_system"),
             "databases": a.get("databases")}
            for a in ranked
        ],
        "risk_trend": RISK_TREND,
        "tech_vs_risk": [
            {"id": a["id"], "name": a.get("name"), "risk_score": a.get("risk_score"),
             "cost_annual": a.get("cost_annual"), "cost_display": format_currency(a.get("cost_annual") or 0),
             "primary_technology": primary_technology(a.get("stack")),
             "size": math.sqrt(max(a.get("cost_annual") or 0, 0)) / 100}
            for a in ranked
        ],
        "thresholds": {"critical": HIGH_RISK_ABOVE, "moderate": MEDIUM_RISK_FROM},
    }
