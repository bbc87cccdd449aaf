import re

QUESTIONS = [
	{"text": "Where do you want to travel?", "hint": "どこへ旅行したいですか？\ntravel: to go to a far place\n旅行：遠くへ行くこと", "grammarTag": "want to"},
	{"text": "Have you ever been abroad?", "hint": "Talk about a trip / 旅行", "grammarTag": "present perfect"},
	{"text": "How do you pack your bag?", "hint": None, "grammarTag": None},
]


def _create(client, **body):
	payload = {"topic": "travel", "classSize": 20, "count": 3}
	payload.update(body)
	res = client.post("/api/session", json=payload)
	assert res.status_code == 200
	return res.json()


def test_create_session(client):
	body = _create(client)
	assert body["ok"] is True
	assert re.match(r"^[A-Z0-9]{4}-[A-Z0-9]{4}$", body["classId"])
	session = body["session"]
	assert session["classId"] == body["classId"]
	assert session["topic"] == "travel"
	assert session["classSize"] == 20
	assert session["count"] == 3
	assert session["studentsJoined"] == 0
	assert session["questions"] == []


def test_create_then_read(client):
	created = _create(client, topic="food", classSize=8, count=4)
	res = client.get("/api/session", params={"classId": created["classId"]})
	assert res.status_code == 200
	session = res.json()["session"]
	assert (session["topic"], session["classSize"], session["count"]) == ("food", 8, 4)
	assert session["questions"] == []


def test_create_with_defaults(client):
	res = client.post("/api/session", json={})
	session = res.json()["session"]
	assert session["topic"] == "general"
	assert session["classSize"] == 0
	assert session["count"] == 5


def test_create_rejects_negative_class_size(client):
	res = client.post("/api/session", json={"topic": "x", "classSize": -1})
	assert res.status_code == 400
	assert res.json()["ok"] is False


def test_read_missing_class_id(client):
	res = client.get("/api/session")
	assert res.status_code == 400
	assert res.json() == {"ok": False, "error": "Missing classId"}


def test_read_unknown_session(client):
	res = client.get("/api/session", params={"classId": "NOPE-0000"})
	assert res.status_code == 404
	assert res.json() == {"ok": False, "error": "Not found"}


def test_save_questions_twice_is_identical(client):
	class_id = _create(client)["classId"]
	first = client.put("/api/session", params={"classId": class_id}, json={"questions": QUESTIONS})
	second = client.put("/api/session", params={"classId": class_id}, json={"questions": QUESTIONS})
	assert first.status_code == second.status_code == 200
	assert first.json()["session"]["questions"] == QUESTIONS
	assert second.json()["session"]["questions"] == first.json()["session"]["questions"]

	stored = client.get("/api/session", params={"classId": class_id}).json()["session"]
	assert stored["questions"] == QUESTIONS


def test_increment_joined(client):
	class_id = _create(client)["classId"]
	client.put("/api/session", params={"classId": class_id}, json={"questions": QUESTIONS})
	res = client.put("/api/session", params={"classId": class_id}, json={"incrementJoined": True})
	session = res.json()["session"]
	assert session["studentsJoined"] == 1
	assert session["questions"] == QUESTIONS


def test_update_unknown_session(client):
	res = client.put("/api/session", params={"classId": "NOPE-0000"}, json={"incrementJoined": True})
	assert res.status_code == 404


def test_update_missing_class_id(client):
	res = client.put("/api/session", json={"incrementJoined": True})
	assert res.status_code == 400


def test_update_rejects_malformed_questions(client):
	class_id = _create(client)["classId"]
	res = client.put("/api/session", params={"classId": class_id}, json={"questions": "not a list"})
	assert res.status_code == 400
	assert res.json()["ok"] is False


def test_student_lookup_wraps(client):
	class_id = _create(client)["classId"]
	client.put("/api/session", params={"classId": class_id}, json={"questions": QUESTIONS})

	res = client.get("/api/session/student", params={"classId": class_id.lower(), "number": 4})
	assert res.status_code == 200
	body = res.json()
	assert body["index"] == 0
	assert body["studentNumber"] == 4
	assert body["classId"] == class_id
	assert body["item"]["text"] == QUESTIONS[0]["text"]
	assert body["hintSpeech"] == "travel: to go to a far place"

	second = client.get("/api/session/student", params={"classId": class_id, "number": 2}).json()
	assert second["index"] == 1
	assert second["hintSpeech"] == "Talk about a trip"

	third = client.get("/api/session/student", params={"classId": class_id, "number": 3}).json()
	assert third["hintSpeech"] is None


def test_student_lookup_without_questions(client):
	class_id = _create(client)["classId"]
	res = client.get("/api/session/student", params={"classId": class_id, "number": 1})
	assert res.status_code == 404
	assert res.json()["error"] == "Session not found or has no questions"


def test_student_lookup_rejects_zero(client):
	class_id = _create(client)["classId"]
	client.put("/api/session", params={"classId": class_id}, json={"questions": QUESTIONS})
	res = client.get("/api/session/student", params={"classId": class_id, "number": 0})
	assert res.status_code == 400


def test_health(client):
	res = client.get("/health")
	assert res.status_code == 200
	assert res.json()["status"] == "ok"


def test_create_with_zero_count_uses_default(client):
	session = _create(client, count=0)["session"]
	assert session["count"] == 5
