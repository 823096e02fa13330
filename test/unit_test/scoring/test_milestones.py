from datetime import datetime

from productlobby.scoring.milestones import MILESTONE_THRESHOLDS, build_milestones, milestone_report


def test_every_threshold_is_reported():
    milestones = build_milestones({})

    assert len(milestones) == sum(len(t) for t in MILESTONE_THRESHOLDS.values())
    assert not any(m.achieved for m in milestones)
    assert all(m.progress_percent == 0 for m in milestones)


def test_report_marks_achieved_first():
    reached = datetime(2024, 5, 1)
    report = milestone_report(
        total_supporters=12,
        total_votes=0,
        total_shares=5,
        days_active=8,
        achieved_events={("supporters", 10): reached, ("supporters", 50): reached},
    )

    assert report.total_milestones_achieved == 3
    assert [m.id for m in report.milestones[:3]] == ["days_active-7", "shares-5", "supporters-10"]

    by_id = {m.id: m for m in report.milestones}
    assert by_id["supporters-10"].achieved_at == reached
    assert by_id["supporters-50"].achieved_at is None
    assert by_id["supporters-50"].progress_percent == 24
    assert by_id["supporters-1000"].progress_percent == 1


def test_progress_percent_is_capped():
    milestones = build_milestones({"shares": 900})

    assert all(m.progress_percent == 100 for m in milestones if m.type == "shares")
