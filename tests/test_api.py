"""HTTP layer: routing, payload validation and error-to-status mapping."""

import pytest

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]

API = "/api/v1"


async def _exercise(client, name):
    response = await client.post(f"{API}/exercises", json={"name": name})
    assert response.status_code == 201
    return response.json()


async def _template_with(client, name, *exercise_ids):
    template = (await client.post(f"{API}/templates", json={"name": name})).json()
    for exercise_id in exercise_ids:
        response = await client.post(
            f"{API}/templates/{template['id']}/exercises",
            json={"exercise_id": exercise_id, "target_sets": 5, "target_reps": 5},
        )
        assert response.status_code == 201
    return template


class TestHealth:
    async def test_root_and_health(self, client):
        assert (await client.get("/")).json()["status"] == "ok"
        assert (await client.get(f"{API}/health")).json() == {"status": "ok"}

    async def test_ready_checks_database(self, client):
        response = await client.get(f"{API}/health/ready")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"


class TestExercisesApi:
    async def test_create_list_search(self, client):
        await _exercise(client, "Squat")
        await _exercise(client, "Bench Press")
        names = [e["name"] for e in (await client.get(f"{API}/exercises")).json()]
        assert names == ["Bench Press", "Squat"]
        found = (await client.get(f"{API}/exercises", params={"q": "squ"})).json()
        assert [e["name"] for e in found] == ["Squat"]

    async def test_duplicate_is_conflict(self, client):
        await _exercise(client, "Squat")
        response = await client.post(f"{API}/exercises", json={"name": "Squat"})
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    async def test_blank_name_is_bad_request(self, client):
        response = await client.post(f"{API}/exercises", json={"name": "   "})
        assert response.status_code == 400

    async def test_missing_is_not_found(self, client):
        assert (await client.get(f"{API}/exercises/999")).status_code == 404
        assert (await client.delete(f"{API}/exercises/999")).status_code == 404

    async def test_delete_referenced_is_conflict(self, client):
        squat = await _exercise(client, "Squat")
        await _template_with(client, "Legs", squat["id"])
        response = await client.delete(f"{API}/exercises/{squat['id']}")
        assert response.status_code == 409
        assert (await client.get(f"{API}/exercises/{squat['id']}")).status_code == 200


class TestTemplatesApi:
    async def test_add_reorder_update_remove(self, client):
        squat = await _exercise(client, "Squat")
        lunge = await _exercise(client, "Lunge")
        template = await _template_with(client, "Legs", squat["id"], lunge["id"])

        detail = (await client.get(f"{API}/templates/{template['id']}")).json()
        slot_ids = [e["id"] for e in detail["exercises"]]
        response = await client.put(
            f"{API}/templates/{template['id']}/exercises/order",
            json={"ids": list(reversed(slot_ids))},
        )
        assert [e["exercise"]["name"] for e in response.json()["exercises"]] == ["Lunge", "Squat"]

        response = await client.patch(
            f"{API}/templates/exercises/{slot_ids[0]}",
            json={"target_sets": 3, "target_reps": 8},
        )
        assert response.json()["target_sets"] == 3

        assert (await client.delete(f"{API}/templates/exercises/{slot_ids[0]}")).status_code == 204
        assert (await client.delete(f"{API}/templates/exercises/{slot_ids[0]}")).status_code == 404

    async def test_zero_targets_rejected_by_schema(self, client):
        squat = await _exercise(client, "Squat")
        template = await _template_with(client, "Legs")
        response = await client.post(
            f"{API}/templates/{template['id']}/exercises",
            json={"exercise_id": squat["id"], "target_sets": 0, "target_reps": 5},
        )
        assert response.status_code == 422

    async def test_bad_reorder_is_server_error(self, client):
        squat = await _exercise(client, "Squat")
        template = await _template_with(client, "Legs", squat["id"])
        response = await client.put(
            f"{API}/templates/{template['id']}/exercises/order", json={"ids": [424242]}
        )
        assert response.status_code == 500

    async def test_delete_in_routine_is_conflict(self, client):
        template = await _template_with(client, "Legs")
        routine = (await client.post(f"{API}/routines", json={"name": "PPL"})).json()
        response = await client.post(
            f"{API}/routines/{routine['id']}/templates", json={"template_id": template["id"]}
        )
        assert response.status_code == 201
        assert (await client.delete(f"{API}/templates/{template['id']}")).status_code == 409


class TestWorkoutsApi:
    async def test_full_session(self, client):
        squat = await _exercise(client, "Squat")
        template = await _template_with(client, "Leg Day", squat["id"])

        response = await client.post(
            f"{API}/workouts",
            json={"name": "Monday", "date": "2026-03-02", "template_id": template["id"]},
        )
        assert response.status_code == 201
        workout = response.json()
        assert workout["status"] == "in_progress"
        [entry] = workout["exercises"]
        assert (entry["target_sets"], entry["target_reps"]) == (5, 5)

        response = await client.post(
            f"{API}/workouts/exercises/{entry['id']}/sets", json={"reps": 5, "weight": 225}
        )
        assert response.status_code == 201
        set_id = response.json()["id"]
        response = await client.patch(f"{API}/workouts/sets/{set_id}", json={"reps": 4, "weight": 225})
        assert response.json()["reps"] == 4

        response = await client.post(f"{API}/workouts/{workout['id']}/finish")
        assert response.json()["status"] == "finished"

        history = (await client.get(f"{API}/workouts/history")).json()
        assert [(w["name"], w["set_count"]) for w in history] == [("Monday", 1)]
        assert (await client.get(f"{API}/workouts")).json() == []

        response = await client.post(
            f"{API}/workouts", json={"name": "Next", "date": "2026-03-09", "template_id": template["id"]}
        )
        assert response.json()["exercises"][0]["last_weight"] == 225.0

    async def test_finished_workout_rejects_changes(self, client):
        squat = await _exercise(client, "Squat")
        workout = (
            await client.post(f"{API}/workouts", json={"name": "Done", "date": "2026-03-02"})
        ).json()
        entry = (
            await client.post(
                f"{API}/workouts/{workout['id']}/exercises", json={"exercise_id": squat["id"]}
            )
        ).json()
        await client.post(f"{API}/workouts/{workout['id']}/finish")

        response = await client.put(
            f"{API}/workouts/{workout['id']}", json={"name": "Edited", "date": "2026-03-02"}
        )
        assert response.status_code == 400
        response = await client.post(
            f"{API}/workouts/exercises/{entry['id']}/sets", json={"reps": 5, "weight": 100}
        )
        assert response.status_code == 400
        assert "finished" in response.json()["detail"]
        response = await client.post(
            f"{API}/workouts/{workout['id']}/exercises", json={"exercise_id": squat["id"]}
        )
        assert response.status_code == 400

        # finishing again is harmless
        assert (await client.post(f"{API}/workouts/{workout['id']}/finish")).status_code == 200
        assert (await client.delete(f"{API}/workouts/{workout['id']}")).status_code == 204

    async def test_not_found(self, client):
        assert (await client.get(f"{API}/workouts/77")).status_code == 404
        assert (await client.post(f"{API}/workouts/77/finish")).status_code == 404
        response = await client.put(f"{API}/workouts/77", json={"name": "x", "date": "2026-03-02"})
        assert response.status_code == 404
        response = await client.post(
            f"{API}/workouts", json={"name": "x", "date": "2026-03-02", "template_id": 77}
        )
        assert response.status_code == 404

    async def test_negative_reps_rejected(self, client):
        squat = await _exercise(client, "Squat")
        workout = (
            await client.post(f"{API}/workouts", json={"name": "W", "date": "2026-03-02"})
        ).json()
        entry = (
            await client.post(
                f"{API}/workouts/{workout['id']}/exercises", json={"exercise_id": squat["id"]}
            )
        ).json()
        response = await client.post(
            f"{API}/workouts/exercises/{entry['id']}/sets", json={"reps": -1, "weight": 0}
        )
        assert response.status_code == 422


class TestDashboardApi:
    async def test_dashboard_sections(self, client):
        await _template_with(client, "Legs")
        await client.post(f"{API}/routines", json={"name": "PPL"})
        active = (await client.post(f"{API}/workouts", json={"name": "Now", "date": "2026-03-02"})).json()
        done = (await client.post(f"{API}/workouts", json={"name": "Then", "date": "2026-03-01"})).json()
        await client.post(f"{API}/workouts/{done['id']}/finish")

        dashboard = (await client.get(f"{API}/dashboard")).json()
        assert [w["id"] for w in dashboard["active_workouts"]] == [active["id"]]
        assert [w["id"] for w in dashboard["recent_workouts"]] == [done["id"]]
        assert [t["name"] for t in dashboard["templates"]] == ["Legs"]
        assert [r["name"] for r in dashboard["routines"]] == ["PPL"]
