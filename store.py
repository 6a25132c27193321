"""
Persistence for App Landscape.

The sample landscape (seed_data) is never written to the database; every read
returns samples first, then the records stored in SQLite. Writes go to SQLite
only and must keep interface endpoints pointing at known application ids.
"""

from __future__ import annotations
import csv, io, json, logging, math, os, sqlite3, uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from portfolio import CRITICALITIES, LIFECYCLES, STATUSES
from seed_data import APPS_CSV_SAMPLE, INTERFACES_CSV_SAMPLE, SAMPLE_APPLICATIONS, SAMPLE_INTERFACES

log = logging.getLogger(__name__)

_BASE   = os.path.dirname(os.path.abspath(__file__))
DB_PATH = os.environ.get("LANDSCAPE_DB", os.path.join(_BASE, "landscape.db"))

LIST_FIELDS = ("business_functions", "data_processed")
APP_FIELDS = (
    "id", "name", "description", "application_type", "business_functions",
    "owner", "owner_department", "contact_person", "contact_email", "contact_phone",
    "stack", "databases", "operating_system", "business_capability", "lifecycle",
    "cost_annual", "risk_score", "status", "error_message", "warning_message",
    "last_update", "data_processed", "data_storage",
)
INTERFACE_FIELDS = ("id", "source", "target", "protocol", "criticality", "description", "data")
DIRECTIONS = ("outgoing", "incoming")


class StoreError(Exception):
    """A write that would break the catalog (duplicate id, dangling interface, bad value)."""


# ─── DATABASE ──────────────────────────────────────────────────────────────────
@contextmanager
def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn; conn.commit()
    except Exception:
        conn.rollback(); raise
    finally:
        conn.close()

DDL = """
CREATE TABLE IF NOT EXISTS applications (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT DEFAULT '', application_type TEXT DEFAULT 'Other',
    business_functions TEXT DEFAULT '[]',
    owner TEXT DEFAULT '', owner_department TEXT DEFAULT '',
    contact_person TEXT DEFAULT '', contact_email TEXT DEFAULT '', contact_phone TEXT DEFAULT '',
    stack TEXT DEFAULT '', databases TEXT DEFAULT '', operating_system TEXT DEFAULT '',
    business_capability TEXT DEFAULT '', lifecycle TEXT DEFAULT 'Production',
    cost_annual REAL DEFAULT 0, risk_score INTEGER DEFAULT 0,
    status TEXT DEFAULT 'healthy', error_message TEXT, warning_message TEXT,
    last_update TEXT, data_processed TEXT DEFAULT '[]', data_storage TEXT DEFAULT ''
);
CREATE TABLE IF NOT EXISTS interfaces (
    id TEXT PRIMARY KEY,
    source TEXT NOT NULL, target TEXT NOT NULL,
    protocol TEXT DEFAULT '', criticality TEXT DEFAULT 'Medium',
    description TEXT DEFAULT '', data TEXT DEFAULT ''
);
"""

def init_db():
    with get_db() as conn:
        conn.executescript(DDL)
        n_apps = conn.execute("SELECT COUNT(*) FROM applications").fetchone()[0]
        n_intf = conn.execute("SELECT COUNT(*) FROM interfaces").fetchone()[0]
    log.info(f"DB ready: {DB_PATH} ({n_apps} stored applications, {n_intf} stored interfaces)")

# ─── HELPERS ───────────────────────────────────────────────────────────────────
def row_to_app(row) -> dict:
    d = dict(row)
    for f in LIST_FIELDS:
        try:
            d[f] = json.loads(d.get(f) or "[]")
        except (json.JSONDecodeError, ValueError):
            d[f] = []
    cost = d.get("cost_annual")
    if isinstance(cost, float) and cost.is_integer():
        d["cost_annual"] = int(cost)
    return d

def _app_params(app: dict) -> tuple:
    return tuple(json.dumps(app.get(f) or []) if f in LIST_FIELDS else app.get(f) for f in APP_FIELDS)

def _insert_app(conn, app: dict):
    conn.execute(f"INSERT INTO applications ({','.join(APP_FIELDS)}) VALUES ({','.join('?' * len(APP_FIELDS))})",
                 _app_params(app))

def _update_app(conn, app: dict):
    cols = ",".join(f"{f}=?" for f in APP_FIELDS[1:])
    conn.execute(f"UPDATE applications SET {cols} WHERE id=?", _app_params(app)[1:] + (app["id"],))

def _upsert_interface(conn, intf: dict) -> bool:
    """True when a new row was added."""
    exists = conn.execute("SELECT 1 FROM interfaces WHERE id=?", (intf["id"],)).fetchone()
    params = tuple(intf.get(f) for f in INTERFACE_FIELDS)
    if exists:
        conn.execute("""UPDATE interfaces SET source=?,target=?,protocol=?,criticality=?,
            description=?,data=? WHERE id=?""", params[1:] + (intf["id"],))
        return False
    conn.execute(f"INSERT INTO interfaces ({','.join(INTERFACE_FIELDS)}) VALUES (?,?,?,?,?,?,?)", params)
    return True

def _known_ids(conn) -> Set[str]:
    return {a["id"] for a in SAMPLE_APPLICATIONS} | {
        r["id"] for r in conn.execute("SELECT id FROM applications").fetchall()}

def _sample_ids() -> Set[str]:
    return {a["id"] for a in SAMPLE_APPLICATIONS}

def _check_choice(value, allowed, label):
    if value is not None and value not in allowed:
        raise StoreError(f"Invalid {label} '{value}'. Use one of: {', '.join(allowed)}")

def _check_app(app: dict):
    if not (app.get("name") or "").strip(): raise StoreError("name is required")
    _check_choice(app.get("lifecycle"), LIFECYCLES, "lifecycle")
    _check_choice(app.get("status"), STATUSES, "status")
    score = app.get("risk_score")
    if score is not None and not 0 <= score <= 100:
        raise StoreError(f"risk_score must be between 0 and 100, got {score}")
    cost = app.get("cost_annual") or 0
    if not math.isfinite(cost):
        raise StoreError(f"cost_annual must be a finite number, got {cost}")
    if cost < 0:
        raise StoreError("cost_annual must not be negative")

# ─── READS ─────────────────────────────────────────────────────────────────────
def fetch_stored_applications() -> List[dict]:
    with get_db() as conn:
        return [row_to_app(r) for r in conn.execute("SELECT * FROM applications ORDER BY rowid").fetchall()]

def fetch_stored_interfaces() -> List[dict]:
    with get_db() as conn:
        return [dict(r) for r in conn.execute("SELECT * FROM interfaces ORDER BY rowid").fetchall()]

def fetch_applications() -> List[dict]:
    return [dict(a) for a in SAMPLE_APPLICATIONS] + fetch_stored_applications()

def fetch_interfaces() -> List[dict]:
    return [dict(i) for i in SAMPLE_INTERFACES] + fetch_stored_interfaces()

def fetch_application_by_id(app_id: str) -> Optional[dict]:
    return next((a for a in fetch_applications() if a["id"] == app_id), None)

def fetch_interfaces_for_application(app_id: str) -> List[dict]:
    return [i for i in fetch_interfaces() if app_id in (i["source"], i["target"])]

# ─── CREATE ────────────────────────────────────────────────────────────────────
def create_application(app: dict, interface_forms: Optional[List[dict]] = None) -> Tuple[dict, List[dict]]:
    """
    Store a new application and the interfaces declared on its form.

    Each form carries protocol/criticality/description/data and a list of
    relationships {app_id, direction}; one interface is created per
    relationship, with the new app as source for `outgoing` and as target for
    `incoming`.
    """
    app = {f: app.get(f) for f in APP_FIELDS}
    app["id"] = app["id"] or str(uuid.uuid4())
    app["status"] = app["status"] or "healthy"
    app["risk_score"] = app["risk_score"] if app["risk_score"] is not None else 0
    app["cost_annual"] = app["cost_annual"] or 0
    app["lifecycle"] = app["lifecycle"] or "Production"
    app["application_type"] = app["application_type"] or "Other"
    app["last_update"] = app["last_update"] or datetime.now().isoformat(timespec="seconds")
    _check_app(app)

    new_interfaces = []
    with get_db() as conn:
        known = _known_ids(conn)
        if app["id"] in known: raise StoreError(f"Application {app['id']} already exists")
        for n, form in enumerate(interface_forms or []):
            _check_choice(form.get("criticality") or "Medium", CRITICALITIES, "criticality")
            for m, rel in enumerate(form.get("relationships") or []):
                peer, direction = rel.get("app_id"), rel.get("direction") or "outgoing"
                _check_choice(direction, DIRECTIONS, "direction")
                if peer not in known: raise StoreError(f"Related application {peer} not found")
                outgoing = direction == "outgoing"
                new_interfaces.append({
                    "id":          f"INT{app['id']}-{n}-{m}",
                    "source":      app["id"] if outgoing else peer,
                    "target":      peer if outgoing else app["id"],
                    "protocol":    form.get("protocol") or "",
                    "criticality": form.get("criticality") or "Medium",
                    "description": form.get("description") or "",
                    "data":        form.get("data") or "",
                })
        _insert_app(conn, app)
        for intf in new_interfaces:
            _upsert_interface(conn, intf)
    log.info(f"Created application {app['id']} ({app['name']}) with {len(new_interfaces)} interfaces")
    return {**app, **{f: app[f] or [] for f in LIST_FIELDS}}, new_interfaces

# ─── CSV IMPORT ────────────────────────────────────────────────────────────────
def _number(value: str, cast, field: str):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} is not a number: {value!r}")

def parse_applications_csv(text: str) -> Tuple[List[dict], int]:
    """Rows of the applications CSV format -> (apps, invalid row count)."""
    apps, errors = [], 0
    for n, row in enumerate(csv.DictReader(io.StringIO(text.strip())), start=2):
        try:
            if not (row.get("id") or "").strip() or not (row.get("name") or "").strip():
                raise ValueError("id and name are required")
            cost = _number(row.get("cost_annual") or 0, float, "cost_annual")
            app = {
                "id":                  row["id"].strip(),
                "name":                row["name"].strip(),
                "owner":               row.get("owner") or "",
                "stack":               row.get("stack") or "",
                "business_capability": row.get("business_capability") or "",
                "lifecycle":           row.get("lifecycle") or "Production",
                "cost_annual":         int(cost) if cost.is_integer() else cost,
                "risk_score":          _number(row.get("risk_score") or 0, int, "risk_score"),
                "status":              row.get("status") or "healthy",
                "error_message":       row.get("error_message") or None,
                "last_update":         row.get("last_update") or datetime.now().strftime("%Y-%m-%d"),
                "application_type":    row.get("application_type") or "Other",
            }
            _check_app(app)
        except (ValueError, StoreError) as ex:
            errors += 1
            log.warning(f"Applications CSV line {n} skipped: {ex}")
            continue
        apps.append(app)
    return apps, errors

def parse_interfaces_csv(text: str) -> Tuple[List[dict], int]:
    interfaces, errors = [], 0
    for n, row in enumerate(csv.DictReader(io.StringIO(text.strip())), start=2):
        source, target = (row.get("source") or "").strip(), (row.get("target") or "").strip()
        criticality = (row.get("criticality") or "Medium").strip()
        if not source or not target or criticality not in CRITICALITIES:
            errors += 1
            log.warning(f"Interfaces CSV line {n} skipped: need source, target and a criticality of {CRITICALITIES}")
            continue
        interfaces.append({
            "id":          (row.get("id") or "").strip() or f"CSV-{source}-{target}-{n}",
            "source":      source,
            "target":      target,
            "protocol":    row.get("protocol") or "",
            "criticality": criticality,
            "description": row.get("description") or "",
            "data":        row.get("data") or "",
        })
    return interfaces, errors

def import_csv(apps_csv: str = "", interfaces_csv: str = "", mode: str = "upsert") -> dict:
    """
    mode=upsert : insert new + update existing stored records (default)
    mode=replace: clear stored records first, then insert; samples are untouched

    Rows are checked before anything is written: sample ids are read-only and
    interface endpoints must exist once the import is applied. A replace with
    no row left after those checks is refused and leaves the store as it was.
    """
    if mode not in ("upsert", "replace"):
        raise StoreError(f"Invalid mode '{mode}'. Use 'upsert' or 'replace'")
    apps, app_errors = parse_applications_csv(apps_csv) if apps_csv else ([], 0)
    interfaces, intf_errors = parse_interfaces_csv(interfaces_csv) if interfaces_csv else ([], 0)
    if not apps and not interfaces:
        raise StoreError("No valid rows to import")

    counts = {"applications": {"added": 0, "updated": 0, "errors": app_errors},
              "interfaces":   {"added": 0, "updated": 0, "errors": intf_errors}}
    samples = _sample_ids()
    sample_interfaces = {i["id"] for i in SAMPLE_INTERFACES}
    with get_db() as conn:
        valid_apps = []
        for a in apps:
            if a["id"] in samples:
                counts["applications"]["errors"] += 1
                log.warning(f"  Import error {a['id']}: sample applications are read-only")
                continue
            valid_apps.append(a)

        stored = set() if mode == "replace" else {
            r["id"] for r in conn.execute("SELECT id FROM applications").fetchall()}
        known = samples | stored | {a["id"] for a in valid_apps}
        valid_interfaces = []
        for i in interfaces:
            if i["id"] in sample_interfaces:
                counts["interfaces"]["errors"] += 1
                log.warning(f"  Import error {i['id']}: sample interfaces are read-only")
                continue
            if i["source"] not in known or i["target"] not in known:
                counts["interfaces"]["errors"] += 1
                log.warning(f"  Import error {i['id']}: endpoint {i['source']} -> {i['target']} not found")
                continue
            valid_interfaces.append(i)

        if mode == "replace":
            if not valid_apps and not valid_interfaces:
                raise StoreError("No importable rows, replace aborted to protect existing data")
            conn.execute("DELETE FROM interfaces")
            conn.execute("DELETE FROM applications")
        for a in valid_apps:
            c = counts["applications"]
            if conn.execute("SELECT 1 FROM applications WHERE id=?", (a["id"],)).fetchone():
                _update_app(conn, {f: a.get(f) for f in APP_FIELDS}); c["updated"] += 1
            else:
                _insert_app(conn, {f: a.get(f) for f in APP_FIELDS}); c["added"] += 1
        for i in valid_interfaces:
            c = counts["interfaces"]
            if _upsert_interface(conn, i): c["added"] += 1
            else:                          c["updated"] += 1

    added   = sum(c["added"] for c in counts.values())
    updated = sum(c["updated"] for c in counts.values())
    errors  = sum(c["errors"] for c in counts.values())
    log.info(f"Import ({mode}) complete: {added} added, {updated} updated, {errors} errors")
    return {"added": added, "updated": updated, "errors": errors, "total": added + updated,
            **counts, "message": "Import complete"}

def seed_demo_data() -> dict:
    result = import_csv(APPS_CSV_SAMPLE, INTERFACES_CSV_SAMPLE, "upsert")
    return {"success": True, "message": "Demo data successfully seeded to database",
            "added": result["added"], "updated": result["updated"]}

def export_all() -> Dict[str, List[dict]]:
    return {"applications": fetch_applications(), "interfaces": fetch_interfaces()}
