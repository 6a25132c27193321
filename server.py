"""
App Landscape: Application Portfolio & Dependency Dashboard (FastAPI + SQLite)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Requirements:  pip install -e .

Run:
  python server.py
  or: uvicorn server:app --reload --port 8000

Endpoints:
  GET  /                            -> Dashboard (static/index.html)
  GET  /api/version                 -> App version info
  GET  /api/config                  -> landscape.config.json merged over defaults
  GET  /api/options                 -> Form vocabularies (lifecycles, statuses, types, ...)
  GET  /api/stats                   -> Dashboard KPIs
  GET  /api/domains                 -> Business domains (capabilities)
  GET  /api/metrics                 -> Landscape analysis charts (filter: domain)
  GET  /api/apps                    -> List apps (filters: search, domain, risk; sort, order)
  GET  /api/apps/{id}               -> App detail with inbound/outbound interfaces
  GET  /api/apps/{id}/interfaces    -> Interfaces touching one app
  POST /api/apps                    -> Create app (+ interfaces from the form)
  GET  /api/interfaces              -> All interfaces
  GET  /api/graph                   -> Dependency graph (filters: status, criticality; fail, fail_message)
  POST /api/import                  -> Import apps/interfaces from CSV text
  POST /api/seed                    -> Seed the bundled CSV demo data
  GET  /api/export                  -> Export merged catalog as JSON
  GET  /docs                        -> Swagger UI
"""

from __future__ import annotations
import json, logging, os, sqlite3, sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

try:
    from fastapi import FastAPI, HTTPException, Query, Request
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import FileResponse, JSONResponse
    from fastapi.staticfiles import StaticFiles
    from pydantic import BaseModel, Field
except ImportError:
    print("=" * 60)
    print("ERROR: FastAPI not installed.")
    print("Run: pip install -e .")
    print("=" * 60)
    raise SystemExit(1)

import depgraph
import portfolio
import store

# ─── LOGGING ───────────────────────────────────────────────────────────────────
def setup_logging(component_name: str, level=logging.INFO, log_file: Optional[str] = None):
    """
    Configure root logging for a component.

    Args:
        component_name: Component identifier shown in every line (e.g. 'landscape')
        level: Logging level name or number
        log_file: Optional file path for a copy of the output
    """
    fmt = f"[%(asctime)s] [{component_name.upper()}] %(levelname)s - %(message)s"
    logging.basicConfig(level=level, format=fmt, datefmt="%Y-%m-%d %H:%M:%S",
                        handlers=[logging.StreamHandler(sys.stdout)])
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        logging.getLogger().addHandler(fh)
    return logging.getLogger(component_name)

log = setup_logging("landscape", log_file=os.environ.get("LANDSCAPE_LOG_FILE"))

# ─── CONFIG: read from landscape.config.json ──────────────────────────────────
_BASE        = os.path.dirname(os.path.abspath(__file__))
_CONFIG_PATH = os.environ.get("LANDSCAPE_CONFIG", os.path.join(_BASE, "landscape.config.json"))

def _load_config() -> dict:
    defaults = {
        "version":      "1.0.0",
        "app_name":     "App Landscape",
        "subtitle":     "APPLICATION PORTFOLIO",
        "organization": "",
        "description":  "Application Portfolio Management & Dependency Graph",
        "port":         8000,
        "log_level":    "INFO",
        "currency":     "EUR",
    }
    if os.path.exists(_CONFIG_PATH):
        try:
            with open(_CONFIG_PATH, "r", encoding="utf-8") as f:
                defaults.update(json.load(f))
            log.info(f"Config loaded from {_CONFIG_PATH}")
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"Cannot read config: {e}, using defaults")
    else:
        log.info(f"{os.path.basename(_CONFIG_PATH)} not found, using defaults")
    return defaults

CFG          = _load_config()
APP_VERSION  = CFG["version"]
APP_NAME     = CFG.get("app_name", "App Landscape")
APP_SUBTITLE = CFG.get("subtitle", "APPLICATION PORTFOLIO")
PORT         = int(CFG.get("port", 8000))
STATIC_DIR   = os.path.join(_BASE, "static")
logging.getLogger().setLevel(str(CFG.get("log_level", "INFO")).upper())

# ─── FASTAPI ───────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    store.init_db()
    yield

app = FastAPI(
    title       = f"{APP_NAME} {APP_VERSION}",
    description = "Application Portfolio Management REST API",
    version     = APP_VERSION,
    lifespan    = lifespan,
)
_ALLOWED_ORIGINS = os.environ.get("ALLOWED_ORIGINS", f"http://localhost:{PORT}").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

@app.exception_handler(sqlite3.Error)
async def _db_error(request: Request, exc: sqlite3.Error):
    log.error(f"Failed to load data for {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Error loading data", "hint": "Please try again later"})

# ─── MODELS ────────────────────────────────────────────────────────────────────
class Relationship(BaseModel):
    app_id: str
    direction: str = "outgoing"   # "outgoing" | "incoming"

class InterfaceForm(BaseModel):
    relationships: List[Relationship] = Field(default_factory=list)
    protocol: str = ""
    criticality: str = "Medium"
    description: str = ""
    data: str = ""

class AppCreate(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    application_type: Optional[str] = None
    business_functions: Optional[List[str]] = None
    owner: Optional[str] = None
    owner_department: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    stack: Optional[str] = None
    databases: Optional[str] = None
    operating_system: Optional[str] = None
    business_capability: Optional[str] = None
    lifecycle: Optional[str] = None
    cost_annual: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    risk_score: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[str] = None
    error_message: Optional[str] = None
    warning_message: Optional[str] = None
    last_update: Optional[str] = None
    data_processed: Optional[List[str]] = None
    data_storage: Optional[str] = None
    interfaces: List[InterfaceForm] = Field(default_factory=list)

class ImportBody(BaseModel):
    apps_csv: str = ""
    interfaces_csv: str = ""
    mode: str = "upsert"   # "upsert" | "replace"

# ─── HELPERS ───────────────────────────────────────────────────────────────────
def _not_found(app_id: str) -> HTTPException:
    return HTTPException(404, f"Application {app_id} not found")

def _check_values(values: Optional[List[str]], allowed, label: str):
    bad = [v for v in values or [] if v not in allowed]
    if bad: raise HTTPException(400, f"Invalid {label} {bad}. Use: {', '.join(allowed)}")

# ─── ROUTES ────────────────────────────────────────────────────────────────────
@app.get("/api/version")
def r_version():
    return {
        "version":    APP_VERSION,
        "app_name":   APP_NAME,
        "subtitle":   APP_SUBTITLE,
        "title":      f"{APP_NAME} {APP_VERSION}",
        "logo_sub":   f"{APP_SUBTITLE} {APP_VERSION}",
    }

@app.get("/api/config")
def get_config():
    """Return landscape.config.json merged over defaults (re-read each time so hot-editable)."""
    return _load_config()

@app.get("/api/options")
def r_options():
    """Choice lists for the add-application form and the table controls."""
    return {
        "lifecycles":        portfolio.LIFECYCLES,
        "statuses":          portfolio.STATUSES,
        "criticalities":     portfolio.CRITICALITIES,
        "risk_levels":       portfolio.RISK_LEVELS,
        "application_types": portfolio.APPLICATION_TYPES,
        "sort_fields":       portfolio.SORT_FIELDS,
        "directions":        store.DIRECTIONS,
    }

@app.get("/api/stats")
def r_stats():
    kpis = portfolio.calculate_kpis(store.fetch_applications())
    return {**kpis, "total_cost_display": portfolio.format_currency(kpis["total_cost"])}

@app.get("/api/domains")
def r_domains():
    return portfolio.business_domains(store.fetch_applications())

@app.get("/api/metrics")
def r_metrics(domain: Optional[str] = None):
    return portfolio.landscape_metrics(store.fetch_applications(), domain)

@app.get("/api/apps")
def r_list(search: Optional[str] = None, domain: Optional[str] = None, risk: Optional[str] = None,
           sort: str = "name", order: str = "asc"):
    apps = store.fetch_applications()
    try:
        shown = portfolio.sort_applications(portfolio.filter_applications(apps, search, domain, risk), sort, order)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {
        "applications": [portfolio.with_risk(a) for a in shown],
        "shown":        len(shown),
        "total":        len(apps),
        "summary":      f"Showing {len(shown)} of {len(apps)} applications",
    }

@app.get("/api/apps/{app_id}")
def r_get(app_id: str):
    found = store.fetch_application_by_id(app_id)
    if not found: raise _not_found(app_id)
    interfaces = store.fetch_interfaces_for_application(app_id)
    inbound, outbound = portfolio.split_interfaces(app_id, interfaces)
    related = portfolio.related_application_ids(app_id, interfaces)
    return {
        **portfolio.with_risk(found),
        "interfaces_count":    len(interfaces),
        "inbound_interfaces":  inbound,
        "outbound_interfaces": outbound,
        "related_apps":        {a["id"]: a for a in store.fetch_applications() if a["id"] in related},
    }

@app.get("/api/apps/{app_id}/interfaces")
def r_app_interfaces(app_id: str):
    if not store.fetch_application_by_id(app_id): raise _not_found(app_id)
    return store.fetch_interfaces_for_application(app_id)

@app.post("/api/apps", status_code=201)
def r_create(body: AppCreate):
    if not (body.name or "").strip(): raise HTTPException(400, "name is required")
    data = body.model_dump(exclude={"interfaces"})
    forms = [f.model_dump() for f in body.interfaces]
    try:
        created, interfaces = store.create_application(data, forms)
    except store.StoreError as e:
        raise HTTPException(400, str(e))
    return {"id": created["id"], "application": created, "interfaces": interfaces, "message": "Created"}

@app.get("/api/interfaces")
def r_interfaces():
    return store.fetch_interfaces()

@app.get("/api/graph")
def r_graph(status: Optional[List[str]] = Query(None), criticality: Optional[List[str]] = Query(None),
            fail: Optional[str] = None, fail_message: str = "System failure"):
    _check_values(status, portfolio.STATUSES, "status")
    _check_values(criticality, portfolio.CRITICALITIES, "criticality")
    graph = depgraph.build_graph(store.fetch_applications(), store.fetch_interfaces())
    impact = None
    if fail:
        graph = depgraph.simulate_failure(graph, fail, fail_message)
        impact = graph.pop("impact")
    graph = depgraph.apply_filters(graph, status, criticality)
    return {**graph, "impact": impact, "options": depgraph.network_options(len(graph["edges"]))}

# ─── IMPORT / SEED / EXPORT ────────────────────────────────────────────────────
@app.post("/api/import")
def r_import(body: ImportBody):
    """
    Import apps/interfaces given as CSV text (same columns as the bundled samples).
    mode=upsert : insert new + update existing (default)
    mode=replace: clear stored records first, then insert all
    """
    try:
        return store.import_csv(body.apps_csv, body.interfaces_csv, body.mode)
    except store.StoreError as e:
        raise HTTPException(400, str(e))

@app.post("/api/seed")
def r_seed():
    return store.seed_demo_data()

@app.get("/api/export")
def r_export():
    """Export samples + stored records as JSON."""
    return store.export_all()

# ─── STATIC + CATCH-ALL ────────────────────────────────────────────────────────
if os.path.isdir(STATIC_DIR):
    app.mount("/assets", StaticFiles(directory=STATIC_DIR), name="assets")

@app.get("/{full_path:path}", include_in_schema=False)
def catch_all(full_path: str = ""):
    if full_path.startswith("api/"): raise HTTPException(404)
    idx = os.path.join(STATIC_DIR, "index.html")
    return FileResponse(idx) if os.path.exists(idx) else JSONResponse(
        {"service": f"{APP_NAME} {APP_VERSION}", "docs": "/docs"})

# ─── ENTRY POINT ───────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    store.init_db()
    print(f"\n{'='*55}")
    print(f"  {APP_NAME} {APP_VERSION}")
    print(f"{'='*55}")
    print(f"  Config   : {_CONFIG_PATH}")
    print(f"  Frontend : http://localhost:{PORT}/")
    print(f"  API Docs : http://localhost:{PORT}/docs")
    print(f"  Database : {os.path.abspath(store.DB_PATH)}")
    print(f"{'='*55}\n")
    uvicorn.run("server:app", host="0.0.0.0", port=PORT, reload=True, reload_excludes=["*.db"])
