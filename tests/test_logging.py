# =============================================
# File: tests/test_logging.py
# =============================================
import sys, os, json
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from conftest import text_reply

def _find_json_events(caplog, name: str):
    out = []
    for rec in caplog.records:
        try:
            data = json.loads(rec.message)
        except ValueError:
            continue
        if isinstance(data, dict) and data.get("event") == name:
            out.append(data)
    return out

def test_structured_log_on_success(client, catalog, auth_headers, caplog):
    caplog.set_level("INFO", logger="luxeaura")
    r = client.get("/cart", headers=auth_headers("u-log"))
    assert r.status_code == 200
    assert r.headers.get("X-Request-ID")

    evt = _find_json_events(caplog, "request.completed")[-1]
    assert evt["path"] == "/cart"
    assert evt["status"] == 200
    assert evt["request_id"] == r.headers["X-Request-ID"]
    assert isinstance(evt["latency_ms"], int)
    assert evt.get("user_id") == "u-log"

def test_function_failure_is_logged_with_context(client, session, catalog, fake_ai, caplog):
    caplog.set_level("INFO", logger="luxeaura")
    from app.db.models import BrowsingHistory
    session.add(BrowsingHistory(user_id="u-fail", product_id=catalog["silk-gown"]))
    session.commit()
    fake_ai(text_reply("definitely not json"))

    r = client.post("/functions/get-recommendations", json={"userId": "u-fail"})
    assert r.status_code == 500

    evt = _find_json_events(caplog, "request.completed")[-1]
    assert evt["path"] == "/functions/get-recommendations"
    assert evt["status"] == 500
    assert evt["ai_ok"] is False
    assert evt["user_id"] == "u-fail"
    assert _find_json_events(caplog, "ai.call")

def test_tryon_log_does_not_leak_image_payload(client, fake_ai, caplog):
    caplog.set_level("INFO", logger="luxeaura")
    result = "data:image/png;base64," + "A" * 400
    fake_ai({"choices": [{"message": {"images": [{"image_url": {"url": result}}]}}]})
    r = client.post("/functions/virtual-tryon", json={
        "userImage": "data:image/jpeg;base64,/9j/AA==",
        "productImage": "https://img.example/x.jpg",
        "productName": "Scarf",
    })
    assert r.status_code == 200
    evt = _find_json_events(caplog, "tryon.completed")[-1]
    assert evt["result"] == "image/png"
    assert all("A" * 400 not in rec.message for rec in caplog.records)
