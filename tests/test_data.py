import pytest

from copilot.data import DataStore
from copilot.models import Assessment, AssessmentResult


def _result(rid, aid="assessment-1", sid="student-1", score=50):
	return AssessmentResult(result_id=rid, assessment_id=aid, student_id=sid, score=score)


def test_demo_store_contents():
	snap = DataStore.with_demo_data().snapshot()
	assert len(snap.assessments) == 2
	assert len(snap.results) == 10
	assert len(snap.students) == 5
	assert {a.subject for a in snap.assessments} == {"Math", "Science"}


def test_upsert_replaces_existing_pair():
	store = DataStore.with_demo_data()
	store.upsert_result(_result("new", score=10))
	rows = [r for r in store.results_for("assessment-1") if r.student_id == "student-1"]
	assert [(r.result_id, r.score) for r in rows] == [("new", 10)]
	assert len(store.results) == 10


def test_upsert_appends_new_pair():
	store = DataStore()
	store.upsert_result(_result("a"))
	store.upsert_result(_result("b", sid="student-2"))
	assert [r.result_id for r in store.results] == ["a", "b"]


def test_snapshot_is_isolated_from_later_mutation():
	store = DataStore.with_demo_data()
	snap = store.snapshot()
	store.upsert_result(_result("late", aid="assessment-9"))
	assert len(snap.results) == 10
	assert len(store.snapshot().results) == 11


def test_duplicate_assessment_rejected():
	store = DataStore.with_demo_data()
	dup = Assessment(assessment_id="assessment-1", title="t", subject="s", grade="5", teacher_id="t", class_id="c")
	with pytest.raises(ValueError):
		store.add_assessment(dup)
	store.add_assessment(dup.model_copy(update={"assessment_id": "assessment-3"}))
	assert len(store.assessments) == 3
