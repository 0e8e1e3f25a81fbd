"""
Locust Load Test Suite

Needs an admin account (see app.utils.create_admin) to seed a coach,
program and student:
  LOCUST_ADMIN_EMAIL=admin@academy.com LOCUST_ADMIN_PASSWORD=... locust -f locustfile.py

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test catalog cache + slot lookups
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import os
import random
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

ADMIN_EMAIL = os.environ.get("LOCUST_ADMIN_EMAIL", "admin@academy.com")
ADMIN_PASSWORD = os.environ.get("LOCUST_ADMIN_PASSWORD", "change-me-please")

# Shared state, filled once in on_test_start
FIXTURE = {}
CONTESTED_DAY = (date.today() + timedelta(days=90)).isoformat()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print(f"SETUP: all booking users will fight for {CONTESTED_DAY}")
    print("="*60)


def seed_fixture(client):
    """Create one coach, program and student shared by every user."""
    if FIXTURE:
        return

    resp = client.post("/api/v1/auth/login", json={
        "email": ADMIN_EMAIL,
        "password": ADMIN_PASSWORD
    })
    if resp.status_code != 200:
        print(f"\n! Admin login failed ({resp.status_code}); booking tasks idle\n")
        return
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    suffix = random.randint(10000, 99999)
    coach = client.post("/api/v1/coaches", headers=headers, json={
        "name": f"Load Coach {suffix}",
        "email": f"load_coach_{suffix}@academy.com",
    })
    program = client.post("/api/v1/programs", headers=headers, json={
        "title": f"Load Program {suffix}",
    })
    student = client.post("/api/v1/students", json={"name": f"Load Student {suffix}"})

    if all(r.status_code == 201 for r in (coach, program, student)) and not FIXTURE:
        FIXTURE.update(
            coach_id=coach.json()["id"],
            program_id=program.json()["id"],
            student_id=student.json()["id"],
        )
        print(f"\n✓ Seeded coach {FIXTURE['coach_id']}\n")


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many users -> nine slots of one coach's day

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify no coach is double booked:
      SELECT coach_id, booking_date, start_time, COUNT(*)
      FROM bookings WHERE status IN ('pending', 'confirmed')
      GROUP BY 1, 2, 3 HAVING COUNT(*) > 1;
    Should return zero rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        seed_fixture(self.client)

    @tag("concurrency")
    @task
    def book_contested_slot(self):
        if not FIXTURE:
            return

        hour = random.randint(9, 17)
        with self.client.post("/api/v1/bookings",
            json={
                **FIXTURE,
                "booking_date": CONTESTED_DAY,
                "start_time": f"{hour:02d}:00:00",
                "end_time": f"{hour + 1:02d}:00:00",
            },
            name="/api/v1/bookings [contested]",
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: slot already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - catalog cache and slot lookups

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false on the API, run again
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        seed_fixture(self.client)

    @tag("throughput", "read")
    @task(10)
    def list_coaches_cached(self):
        self.client.get("/api/v1/coaches", name="/api/v1/coaches [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_programs_cached(self):
        self.client.get("/api/v1/programs", name="/api/v1/programs [cached]")

    @tag("throughput", "read")
    @task(5)
    def available_slots(self):
        """Never cached - always hits the database."""
        if not FIXTURE:
            return
        day = (date.today() + timedelta(days=random.randint(1, 30))).isoformat()
        self.client.get("/api/v1/bookings/available-slots",
            params={"coach_id": FIXTURE["coach_id"], "date": day},
            name="/api/v1/bookings/available-slots")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_coach(self):
        if not FIXTURE:
            return
        with self.client.post("/api/v1/bookings",
            json={**FIXTURE, "coach_id": 999999, "booking_date": CONTESTED_DAY,
                  "start_time": "09:00:00", "end_time": "10:00:00"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 404])

    @tag("edge")
    @task
    def reversed_times(self):
        if not FIXTURE:
            return
        with self.client.post("/api/v1/bookings",
            json={**FIXTURE, "booking_date": CONTESTED_DAY,
                  "start_time": "12:00:00", "end_time": "11:00:00"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def slots_without_date(self):
        with self.client.get("/api/v1/bookings/available-slots",
            params={"coach_id": 1},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def admin_list_without_auth(self):
        with self.client.get("/api/v1/bookings", catch_response=True) as resp:
            self._expect(resp, [401])
