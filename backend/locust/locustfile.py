"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags throughput   # Vendor listing cache
  locust -f locustfile.py --tags edge         # Bad input handling
  locust -f locustfile.py --tags lifecycle    # Booking create/patch churn
  locust -f locustfile.py                     # All tests

Credential issuance lives outside the API, so authenticated scenarios read
bearer tokens from LOAD_TEST_TOKENS (comma separated) and the event/vendor
they book from LOAD_TEST_EVENT_ID / LOAD_TEST_VENDOR_ID. Each token must
belong to the owner of that event.
"""

import os
import random
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

TOKENS = [t.strip() for t in os.environ.get("LOAD_TEST_TOKENS", "").split(",") if t.strip()]
EVENT_ID = int(os.environ.get("LOAD_TEST_EVENT_ID", "0"))
VENDOR_ID = int(os.environ.get("LOAD_TEST_VENDOR_ID", "0"))

CATEGORIES = ["Catering", "Photography", "Decoration", "DJ", "Makeup Artist"]
CITIES = ["Jaipur", "Udaipur", "Delhi", "Mumbai"]

# Shared state
VENDOR_IDS = []


def random_token_headers():
    if not TOKENS:
        return {}
    return {"Authorization": f"Bearer {random.choice(TOKENS)}"}


def booking_body(**overrides):
    event_date = datetime.now(timezone.utc) + timedelta(days=random.randint(30, 180))
    body = {
        "event_id": EVENT_ID,
        "vendor_id": VENDOR_ID,
        "event_date": event_date.isoformat(),
        "amount": random.randint(5, 500) * 1000,
    }
    body.update(overrides)
    return body


class ThroughputUser(HttpUser):
    """
    TEST 1: Throughput - Cache effectiveness on the public vendor listing

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false on the API, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_vendors_cached(self):
        params = {"category": random.choice(CATEGORIES)}
        if random.random() < 0.5:
            params["city"] = random.choice(CITIES)
        resp = self.client.get("/api/v1/vendors/", params=params, name="/api/v1/vendors/ [cached]")
        if resp.status_code == 200:
            for vendor in resp.json():
                if vendor["id"] not in VENDOR_IDS:
                    VENDOR_IDS.append(vendor["id"])

    @tag("throughput", "read")
    @task(3)
    def get_vendor_detail(self):
        if VENDOR_IDS:
            self.client.get(f"/api/v1/vendors/{random.choice(VENDOR_IDS)}", name="/api/v1/vendors/{id}")

    @tag("throughput")
    @task(1)
    def categories(self):
        self.client.get("/api/v1/vendors/categories")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 2: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    Apart from a missing gateway configuration, none of these may answer 5xx.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = random_token_headers()

    def _expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings/", json=booking_body(), catch_response=True) as resp:
            self._expect(resp, [401])

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post(
            "/api/v1/bookings/",
            json=booking_body(event_id=999999),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [401, 404])

    @tag("edge")
    @task
    def negative_amount(self):
        with self.client.post(
            "/api/v1/bookings/",
            json=booking_body(amount=-5),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 401])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            headers={**self.headers, "Content-Type": "application/json"},
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 401])

    @tag("edge")
    @task
    def forged_payment_signature(self):
        with self.client.post(
            "/api/v1/payments/verify",
            json={
                "booking_id": 1,
                "order_id": "order_fake",
                "payment_id": "pay_fake",
                "signature": "0" * 64,
            },
            headers=self.headers,
            catch_response=True,
        ) as resp:
            # 500 only when the API runs without gateway keys
            self._expect(resp, [400, 401, 500])

    @tag("edge")
    @task
    def unsupported_currency(self):
        with self.client.post(
            "/api/v1/payments/create-order",
            json={"booking_id": 1, "amount": 100000, "currency": "USD"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 401])


class LifecycleUser(HttpUser):
    """
    TEST 3: Booking churn - create, patch and walk the state machine

    Run: locust -f locustfile.py --tags lifecycle -u 50 -r 10 --run-time 60s

    Afterwards every booking of the event should sit in a state reachable
    through the transition table, and the event's booking_ids should list
    each surviving booking once.
    """
    wait_time = between(0.5, 2)

    def on_start(self):
        self.headers = random_token_headers()
        self.booking_ids = []

    @tag("lifecycle")
    @task(5)
    def create_booking(self):
        if not (self.headers and EVENT_ID and VENDOR_ID):
            return
        resp = self.client.post("/api/v1/bookings/", json=booking_body(), headers=self.headers)
        if resp.status_code == 201:
            self.booking_ids.append(resp.json()["id"])

    @tag("lifecycle")
    @task(5)
    def advance_status(self):
        if not self.booking_ids:
            return
        booking_id = random.choice(self.booking_ids)
        target = random.choice(["Confirmed", "In Progress", "Completed", "Cancelled"])
        with self.client.put(
            f"/api/v1/bookings/{booking_id}",
            json={"status": target},
            headers=self.headers,
            name="/api/v1/bookings/{id} [status]",
            catch_response=True,
        ) as resp:
            # 400 is an expected rejection from the transition table
            if resp.status_code in [200, 400]:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("lifecycle")
    @task(2)
    def list_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)

    @tag("lifecycle")
    @task(1)
    def delete_booking(self):
        if not self.booking_ids:
            return
        booking_id = self.booking_ids.pop(random.randrange(len(self.booking_ids)))
        self.client.delete(
            f"/api/v1/bookings/{booking_id}",
            headers=self.headers,
            name="/api/v1/bookings/{id} [delete]",
        )
