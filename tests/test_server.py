from __future__ import annotations

import sqlite3

import store


def test_version(client):
    body = client.get("/api/version").json()
    assert body["app_name"] == "App Landscape"
    assert body["title"] == f"App Landscape {body['version']}"


def test_config_has_defaults(client):
    cfg = client.get("/api/config").json()
    assert cfg["currency"] == "EUR"
    assert "port" in cfg


def test_list_apps(client):
    body = client.get("/api/apps").json()
    assert body["total"] == 6
    assert body["summary"] == "Showing 6 of 6 applications"
    assert [a["id"] for a in body["applications"]] == ["DMS", "ERP", "MES", "SUP", "LIMS", "QMS"]
    erp = body["applications"][1]
    assert erp["risk_level"] == "low"
    assert erp["cost_display"] == "420.000 €"


def test_list_apps_filters_and_sorting(client):
    body = client.get("/api/apps", params={"risk": "high"}).json()
    assert [a["id"] for a in body["applications"]] == ["MES"]
    assert body["summary"] == "Showing 1 of 6 applications"

    body = client.get("/api/apps", params={"domain": "Quality Management", "sort": "risk_score", "order": "desc"}).json()
    assert [a["id"] for a in body["applications"]] == ["QMS", "LIMS"]

    body = client.get("/api/apps", params={"search": "splunk"}).json()
    assert [a["id"] for a in body["applications"]] == ["SUP"]


def test_list_apps_rejects_bad_parameters(client):
    assert client.get("/api/apps", params={"sort": "status"}).status_code == 400
    assert client.get("/api/apps", params={"order": "sideways"}).status_code == 400
    assert client.get("/api/apps", params={"risk": "extreme"}).status_code == 400


def test_app_detail(client):
    body = client.get("/api/apps/MES").json()
    assert body["name"] == "Siemens SIMATIC IT"
    assert body["risk_level"] == "high"
    assert body["risk_text"] == "High Risk"
    assert body["cost_display"] == "260.000 €"
    assert body["interfaces_count"] == 4
    assert [i["id"] for i in body["inbound_interfaces"]] == ["INT001", "INT008"]
    assert [i["id"] for i in body["outbound_interfaces"]] == ["INT002", "INT003"]
    assert set(body["related_apps"]) == {"ERP", "SUP", "LIMS"}


def test_app_not_found(client):
    resp = client.get("/api/apps/NOPE")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Application NOPE not found"
    assert client.get("/api/apps/NOPE/interfaces").status_code == 404


def test_app_interfaces(client):
    ids = [i["id"] for i in client.get("/api/apps/QMS/interfaces").json()]
    assert ids == ["INT004", "INT005", "INT006", "INT010"]


def test_create_app(client):
    payload = {
        "id": "ELN", "name": "LabArchives ELN", "owner": "Nina Roth", "stack": "SaaS",
        "business_capability": "Research", "lifecycle": "Development", "cost_annual": 45000, "risk_score": 75,
        "interfaces": [{"protocol": "REST API", "criticality": "High", "data": "Samples",
                        "relationships": [{"app_id": "LIMS", "direction": "outgoing"}]}],
    }
    resp = client.post("/api/apps", json=payload)
    assert resp.status_code == 201
    assert resp.json()["id"] == "ELN"
    assert resp.json()["interfaces"][0]["id"] == "INTELN-0-0"

    detail = client.get("/api/apps/ELN").json()
    assert detail["risk_level"] == "high"
    assert [i["target"] for i in detail["outbound_interfaces"]] == ["LIMS"]
    assert client.get("/api/apps").json()["total"] == 7
    assert client.get("/api/stats").json()["high_risk_apps"] == 2


def test_create_app_validation(client):
    assert client.post("/api/apps", json={"name": " "}).status_code == 400
    assert client.post("/api/apps", json={"name": "X", "risk_score": 150}).status_code == 422
    assert client.post("/api/apps", json={"name": "X", "cost_annual": -1}).status_code == 422
    resp = client.post("/api/apps", json={"name": "X", "interfaces": [
        {"relationships": [{"app_id": "GHOST"}]}]})
    assert resp.status_code == 400
    assert "GHOST" in resp.json()["detail"]
    assert client.post("/api/apps", json={"id": "ERP", "name": "Dup"}).status_code == 400


def test_stats_and_domains(client):
    stats = client.get("/api/stats").json()
    assert stats["total_apps"] == 6
    assert stats["total_cost_display"] == "1.113.000 €"
    assert stats["lifecycles"] == {"Production": 6}
    assert client.get("/api/domains").json()[0] == "Enterprise Resource Planning"


def test_metrics(client):
    body = client.get("/api/metrics", params={"domain": "Manufacturing"}).json()
    assert [p["id"] for p in body["risk_ranking"]] == ["MES"]
    assert body["tech_vs_risk"][0]["primary_technology"] == "Java"


def test_graph_default(client):
    body = client.get("/api/graph").json()
    assert len(body["nodes"]) == 6
    assert len(body["edges"]) == 11
    assert body["impact"] is None
    assert body["options"]["physics"]["solver"] == "forceAtlas2Based"


def test_graph_failure_and_filters(client):
    body = client.get("/api/graph", params=[
        ("fail", "MES"), ("fail_message", "DB down"),
        ("status", "healthy"), ("status", "warning"), ("criticality", "High"),
    ]).json()
    assert body["impact"]["failed"] == "MES"
    assert body["impact"]["affected_nodes"] == ["ERP", "LIMS", "SUP"]
    nodes = {n["id"]: n for n in body["nodes"]}
    assert nodes["MES"]["state"] == "error"
    assert nodes["MES"]["title"] == "Error: DB down"
    assert nodes["MES"]["hidden"] is True
    assert nodes["ERP"]["state"] == "affected"
    assert nodes["QMS"]["hidden"] is False
    shown = {e["id"] for e in body["edges"] if not e["hidden"]}
    assert shown == {"INT001", "INT002", "INT003", "INT006"}


def test_graph_rejects_unknown_filter_values(client):
    assert client.get("/api/graph", params={"status": "broken"}).status_code == 400
    assert client.get("/api/graph", params={"criticality": "Urgent"}).status_code == 400


def test_seed_import_export(client):
    resp = client.post("/api/seed").json()
    assert resp["success"] is True
    assert client.get("/api/apps").json()["total"] == 16
    assert len(client.get("/api/graph").json()["edges"]) == 23

    again = client.post("/api/import", json={"apps_csv": "id,name\napp-011,Extra\n"}).json()
    assert again["added"] == 1
    assert client.post("/api/import", json={"apps_csv": "id,name\napp-012,X\n", "mode": "merge"}).status_code == 400
    assert client.post("/api/import", json={}).status_code == 400

    exported = client.get("/api/export").json()
    assert len(exported["applications"]) == 17


def test_database_errors_become_500(client, monkeypatch):
    def broken():
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(store, "fetch_stored_applications", broken)
    resp = client.get("/api/stats")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Error loading data", "hint": "Please try again later"}


def test_front_page_and_unknown_api(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "App Landscape" in resp.text
    assert client.get("/api/does-not-exist").status_code == 404


def test_options(client):
    body = client.get("/api/options").json()
    assert "End of Life" in body["lifecycles"]
    assert body["criticalities"] == ["High", "Medium", "Low"]
    assert body["application_types"]["LIMS"] == "Laboratory Information Management System (LIMS)"
    assert body["directions"] == ["outgoing", "incoming"]


def test_non_finite_cost_never_reaches_the_catalog(client):
    resp = client.post("/api/import", json={"apps_csv": "id,name,cost_annual\nx1,Bad,inf\n"})
    assert resp.status_code == 400
    resp = client.post("/api/import", json={"apps_csv": "id,name,cost_annual\nx1,Bad,inf\nx2,Good,10\n"})
    assert resp.json()["applications"] == {"added": 1, "updated": 0, "errors": 1}

    body = client.get("/api/apps").json()
    assert body["total"] == 7
    assert client.get("/api/stats").status_code == 200
    assert client.post("/api/apps", json={"name": "X", "cost_annual": "inf"}).status_code == 422
