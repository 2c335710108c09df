#!/usr/bin/env python3
# This project was developed with assistance from AI tools.
"""Live smoke test suite for the Onboarding Checklist API.

Walks one employee through onboarding end to end against a running server:
create, read, gated completion, uploads, assessments, the public link,
and activation.

Prerequisites:
  - API server running on localhost:8000 with AUTH_DISABLED=true
  - PostgreSQL migrated and MinIO reachable from the server

Usage:
  ./scripts/live-tests.py                      # full suite
  ./scripts/live-tests.py --employee-id 90001  # pick an unused employee id
"""

import argparse
import asyncio
import sys
import time

import httpx

BASE = "http://localhost:8000"
HEADERS = {"Origin": "http://localhost:5173"}

_UPLOADS = {
    "pdf": ("document.pdf", b"%PDF-1.4 live test", "application/pdf"),
    "image": ("scan.png", b"\x89PNG live test", "image/png"),
}

# ---------------------------------------------------------------------------
# Test runner
# ---------------------------------------------------------------------------

PASS = 0
FAIL = 0
ERRORS: list[str] = []
SECTION = ""


def section(name: str):
    global SECTION
    SECTION = name
    print(f"\n{'=' * 60}")
    print(f"  {name}")
    print(f"{'=' * 60}\n")


def ok(name: str, passed: bool, detail: str = ""):
    global PASS, FAIL
    if passed:
        PASS += 1
        print(f"  PASS  {name}")
    else:
        FAIL += 1
        msg = f"[{SECTION}] {name}: {detail}" if detail else f"[{SECTION}] {name}"
        ERRORS.append(msg)
        print(f"  FAIL  {name} -- {detail}")


def has_keys(d: dict, *keys: str) -> bool:
    return all(k in d for k in keys)


# ---------------------------------------------------------------------------
# 1. Health
# ---------------------------------------------------------------------------

async def test_health(c: httpx.AsyncClient):
    section("Health")

    r = await c.get("/health/")
    ok("GET /health/ returns 200", r.status_code == 200)
    ok("database ok", r.json().get("database") == "ok", r.text[:80])


# ---------------------------------------------------------------------------
# 2. Creation
# ---------------------------------------------------------------------------

async def test_create(c: httpx.AsyncClient, employee_id: int) -> dict:
    section("Checklist creation")

    r = await c.post(
        "/api/checklists",
        json={"employee_id": employee_id, "role": "team_lead", "department": "information_technology"},
    )
    ok("POST /api/checklists returns 201", r.status_code == 201, r.text[:120])
    body = r.json() if r.status_code == 201 else {}
    ok("response has items and link", has_keys(body, "items", "public_url"))
    ok("role and department overlays merged", len(body.get("items", [])) == 29,
       f"got {len(body.get('items', []))}")

    again = await c.post("/api/checklists", json={"employee_id": employee_id, "role": "employee"})
    ok("second create is 409", again.status_code == 409, f"got {again.status_code}")

    bad = await c.post("/api/checklists", json={"employee_id": -1, "role": "employee"})
    ok("invalid employee id is 422", bad.status_code == 422)
    return body


# ---------------------------------------------------------------------------
# 3. Gating
# ---------------------------------------------------------------------------

async def test_gating(c: httpx.AsyncClient, checklist: dict):
    section("Completion gates")

    items = checklist["items"]
    doc_item = next(i for i in items if i["requires_document"])
    test_item = next(i for i in items if i["requires_psychometric_test"])

    r = await c.patch(f"/api/checklist-items/{doc_item['id']}", json={"is_completed": True})
    ok("document item without upload is 422", r.status_code == 422, f"got {r.status_code}")

    r = await c.patch(f"/api/checklist-items/{test_item['id']}", json={"is_completed": True})
    ok("assessment item without result is 422", r.status_code == 422, f"got {r.status_code}")

    r = await c.post(
        f"/api/checklist-items/{test_item['id']}/assessment-result",
        json={"attempt_id": 1, "score": 150},
    )
    ok("score above 100 is 422", r.status_code == 422)


# ---------------------------------------------------------------------------
# 4. Public link
# ---------------------------------------------------------------------------

async def test_public_link(c: httpx.AsyncClient, checklist: dict):
    section("Public link")

    token = checklist["public_url"].rsplit("/", 1)[-1]
    r = await c.get(f"/api/public/onboarding/{token}")
    ok("GET public checklist returns 200", r.status_code == 200)
    ok("progress included", "progress" in r.json())

    r = await c.get("/api/public/onboarding/definitely-not-a-token")
    ok("unknown token is 404", r.status_code == 404)

    first = checklist["items"][0]
    r = await c.put(f"/api/public/onboarding/{token}/items/{first['id']}", json={"is_completed": True})
    ok("public completion returns 200", r.status_code == 200, r.text[:120])


# ---------------------------------------------------------------------------
# 5. Full run to activation
# ---------------------------------------------------------------------------

async def test_full_run(c: httpx.AsyncClient, checklist: dict):
    section("Full onboarding run")

    started = time.monotonic()
    last = None
    for item in checklist["items"]:
        item_id = item["id"]
        if item["requires_psychometric_test"]:
            await c.post(
                f"/api/checklist-items/{item_id}/assessment-result",
                json={"attempt_id": item_id, "score": 80},
            )
        if item["requires_document"]:
            last = await c.post(
                f"/api/checklist-items/{item_id}/document",
                files={"file": _UPLOADS[item["document_kind"]]},
            )
        else:
            last = await c.patch(f"/api/checklist-items/{item_id}", json={"is_completed": True})
        if last.status_code != 200:
            ok(f"complete {item['template_key']}", False, last.text[:120])
            return

    body = last.json()
    ok("last completion reports all_completed", body.get("all_completed") is True)
    ok("progress is 100", body.get("progress", {}).get("percentage") == 100)
    print(f"  ({len(checklist['items'])} items in {time.monotonic() - started:.1f}s)")

    employee_id = checklist["employee_id"]
    r = await c.get(f"/api/checklists/employees/{employee_id}")
    ok("checklist status completed", r.json().get("status") == "completed")
    ok("activated_at set", r.json().get("activated_at") is not None)

    r = await c.patch(f"/api/checklist-items/{checklist['items'][0]['id']}", json={"is_completed": False})
    ok("unchecking a completed item is 409", r.status_code == 409)

    r = await c.get("/api/audit/verify")
    ok("audit chain verifies", r.json().get("status") == "OK", r.text[:120])


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

async def main():
    parser = argparse.ArgumentParser(description="Live test suite for the Onboarding Checklist API")
    parser.add_argument("--employee-id", type=int, default=int(time.time()) % 1_000_000 + 1,
                        help="Employee id to create (must not already have a checklist)")
    args = parser.parse_args()

    print("=" * 60)
    print("  LIVE TEST SUITE -- Onboarding Checklist API")
    print("=" * 60)

    async with httpx.AsyncClient(base_url=BASE, headers=HEADERS, timeout=15) as c:

        # Pre-flight: make sure server is up
        try:
            r = await c.get("/health/")
            if r.status_code != 200:
                print(f"\n  Server returned {r.status_code} on /health/ -- is it running?")
                sys.exit(2)
        except httpx.ConnectError:
            print("\n  Cannot connect to server at localhost:8000 -- is it running?")
            sys.exit(2)

        await test_health(c)
        checklist = await test_create(c, args.employee_id)
        if checklist:
            await test_gating(c, checklist)
            await test_public_link(c, checklist)
            await test_full_run(c, checklist)

    # Summary
    print(f"\n{'=' * 60}")
    print(f"  RESULTS: {PASS} passed, {FAIL} failed")
    print(f"{'=' * 60}")

    if ERRORS:
        print("\nFailures:")
        for e in ERRORS:
            print(f"  - {e}")

    sys.exit(0 if FAIL == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())
