# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Tests for the business services: pull request lifecycle, team
reconciliation and user activity, against the SQLite-backed stores.
"""
import random
from unittest.mock import MagicMock

import pytest

from conftest import make_team
from reviewer_service.models.domain import PRStatus, User
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.services.pull_request_service import PullRequestService
from reviewer_service.services.team_service import TeamService
from reviewer_service.services.user_service import UserService


@pytest.fixture
def team_service(team_repo, user_repo):
    return TeamService(team_repo, user_repo)


@pytest.fixture
def user_service(user_repo):
    return UserService(user_repo)


@pytest.fixture
def pr_service(pr_repo, user_repo):
    return PullRequestService(pr_repo, user_repo, max_reviewers=2, rng=random.Random(42))


@pytest.fixture
def team_t(team_service):
    """Team T: active A (author), B, C and inactive D."""
    return team_service.create_team(make_team(
        "T", ("A", "Alice", True), ("B", "Bob", True), ("C", "Carol", True), ("D", "Dave", False),
    ))


def _code(exc_info):
    return exc_info.value.code


# ═══════════════════════════════════════════════════════════════════════════
# CREATE
# ═══════════════════════════════════════════════════════════════════════════
class TestCreatePullRequest:
    def test_assigns_active_teammates_only(self, team_t, pr_service):
        pr = pr_service.create_pull_request("p1", "name", "A")
        assert pr.status is PRStatus.OPEN
        assert set(pr.assigned_reviewers) == {"B", "C"}
        assert pr.created_at is not None
        assert pr.merged_at is None

    def test_reviewers_capped_by_max(self, team_service, pr_repo, user_repo):
        team_service.create_team(make_team(
            "big", *[(f"u{i}", f"user{i}", True) for i in range(6)],
        ))
        service = PullRequestService(pr_repo, user_repo, max_reviewers=2)
        pr = service.create_pull_request("p1", "name", "u0")
        assert len(pr.assigned_reviewers) == 2
        assert "u0" not in pr.assigned_reviewers
        assert len(set(pr.assigned_reviewers)) == 2

    def test_no_candidates_is_not_an_error(self, team_service, pr_service):
        team_service.create_team(make_team("solo", ("S", "Sam", True)))
        pr = pr_service.create_pull_request("p1", "name", "S")
        assert pr.assigned_reviewers == []

    def test_persisted(self, team_t, pr_service, pr_repo):
        pr = pr_service.create_pull_request("p1", "name", "A")
        stored = pr_repo.get_by_id("p1")
        assert stored.assigned_reviewers == sorted(pr.assigned_reviewers)

    def test_duplicate_id(self, team_t, pr_service, pr_repo):
        pr_service.create_pull_request("p1", "name", "A")
        before = pr_repo.get_by_id("p1")
        with pytest.raises(DomainError) as exc_info:
            pr_service.create_pull_request("p1", "other", "B")
        assert _code(exc_info) is ErrorCode.PR_EXISTS
        assert pr_repo.get_by_id("p1") == before

    def test_unknown_author(self, team_t, pr_service):
        with pytest.raises(DomainError) as exc_info:
            pr_service.create_pull_request("p1", "name", "ghost")
        assert _code(exc_info) is ErrorCode.NOT_FOUND


# ═══════════════════════════════════════════════════════════════════════════
# MERGE
# ═══════════════════════════════════════════════════════════════════════════
class TestMergePullRequest:
    def test_merge(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "name", "A")
        pr = pr_service.merge_pull_request("p1")
        assert pr.status is PRStatus.MERGED
        assert pr.merged_at is not None
        assert set(pr.assigned_reviewers) == {"B", "C"}

    def test_merge_is_idempotent(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "name", "A")
        first = pr_service.merge_pull_request("p1")
        second = pr_service.merge_pull_request("p1")
        assert second.status is PRStatus.MERGED
        assert second.merged_at == first.merged_at
        assert second.assigned_reviewers == first.assigned_reviewers

    def test_second_merge_writes_nothing(self, team_t, pr_repo, user_repo):
        service = PullRequestService(pr_repo, user_repo)
        service.create_pull_request("p1", "name", "A")
        service.merge_pull_request("p1")
        spy = MagicMock(wraps=pr_repo)
        PullRequestService(spy, user_repo).merge_pull_request("p1")
        spy.set_merged.assert_not_called()

    def test_merge_missing(self, pr_service):
        with pytest.raises(DomainError) as exc_info:
            pr_service.merge_pull_request("nope")
        assert _code(exc_info) is ErrorCode.NOT_FOUND


# ═══════════════════════════════════════════════════════════════════════════
# REASSIGN
# ═══════════════════════════════════════════════════════════════════════════
class TestReassignReviewer:
    def test_reassigns_to_free_teammate(self, team_service, pr_service, user_service):
        team_service.create_team(make_team(
            "T", ("A", "a", True), ("B", "b", True), ("C", "c", True),
        ))
        pr = pr_service.create_pull_request("p1", "name", "A")
        assert set(pr.assigned_reviewers) == {"B", "C"}
        team_service.create_team(make_team("T", ("E", "e", True)))

        pr, new_id = pr_service.reassign_reviewer("p1", "B")
        assert new_id == "E"
        assert set(pr.assigned_reviewers) == {"C", "E"}

    def test_never_picks_author_or_assigned(self, team_service, pr_repo, user_repo):
        team_service.create_team(make_team(
            "T", *[(f"u{i}", f"user{i}", True) for i in range(8)],
        ))
        service = PullRequestService(pr_repo, user_repo, max_reviewers=2)
        for n in range(20):
            pr = service.create_pull_request(f"p{n}", "name", "u0")
            old = pr.assigned_reviewers[0]
            refreshed, new_id = service.reassign_reviewer(pr.pull_request_id, old)
            assert new_id != "u0"
            assert new_id not in pr.assigned_reviewers
            assert old not in refreshed.assigned_reviewers
            assert new_id in refreshed.assigned_reviewers
            assert len(refreshed.assigned_reviewers) == 2

    def test_uses_old_reviewers_team(self, team_service, pr_service, pr_repo):
        team_service.create_team(make_team("T", ("A", "a", True), ("B", "b", True)))
        pr_service.create_pull_request("p1", "name", "A")
        team_service.create_team(make_team("Other", ("B", "b", True), ("X", "x", True)))

        pr, new_id = pr_service.reassign_reviewer("p1", "B")
        assert new_id == "X"
        assert pr.assigned_reviewers == ["X"]

    def test_no_candidate(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "name", "A")
        with pytest.raises(DomainError) as exc_info:
            pr_service.reassign_reviewer("p1", "B")
        assert _code(exc_info) is ErrorCode.NO_CANDIDATE

    def test_not_assigned(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "name", "A")
        with pytest.raises(DomainError) as exc_info:
            pr_service.reassign_reviewer("p1", "D")
        assert _code(exc_info) is ErrorCode.NOT_ASSIGNED

    def test_merged_wins_over_not_assigned(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "name", "A")
        pr_service.merge_pull_request("p1")
        for reviewer in ("C", "D", "ghost"):
            with pytest.raises(DomainError) as exc_info:
                pr_service.reassign_reviewer("p1", reviewer)
            assert _code(exc_info) is ErrorCode.PR_MERGED

    def test_missing_pr(self, pr_service):
        with pytest.raises(DomainError) as exc_info:
            pr_service.reassign_reviewer("nope", "B")
        assert _code(exc_info) is ErrorCode.NOT_FOUND

    def test_concurrent_removal_fails_not_assigned(self, team_service, pr_repo, user_repo):
        team_service.create_team(make_team(
            "T", ("A", "a", True), ("B", "b", True), ("C", "c", True),
        ))
        service = PullRequestService(pr_repo, user_repo, max_reviewers=1)
        pr = service.create_pull_request("p1", "name", "A")
        old = pr.assigned_reviewers[0]

        # the reviewer disappears between the read and the swap
        real_replace = pr_repo.replace_reviewer

        def remove_then_replace(pr_id, old_id, new_id):
            pr_repo.remove_reviewer(pr_id, old_id)
            return real_replace(pr_id, old_id, new_id)

        pr_repo.replace_reviewer = remove_then_replace
        with pytest.raises(DomainError) as exc_info:
            service.reassign_reviewer("p1", old)
        assert _code(exc_info) is ErrorCode.NOT_ASSIGNED
        assert pr_repo.get_reviewers("p1") == []

    def test_concurrent_reassignment_to_same_reviewer_keeps_both(self, team_service, pr_repo, user_repo):
        team_service.create_team(make_team(
            "T", ("A", "a", True), ("B", "b", True), ("C", "c", True),
        ))
        service = PullRequestService(pr_repo, user_repo, max_reviewers=2)
        service.create_pull_request("p1", "name", "A")
        team_service.create_team(make_team("T", ("E", "e", True)))

        # another request swaps C for E between the read and this swap
        real_replace = pr_repo.replace_reviewer

        def other_swap_first(pr_id, old_id, new_id):
            real_replace(pr_id, "C", new_id)
            return real_replace(pr_id, old_id, new_id)

        pr_repo.replace_reviewer = other_swap_first
        with pytest.raises(DomainError) as exc_info:
            service.reassign_reviewer("p1", "B")
        assert _code(exc_info) is ErrorCode.NO_CANDIDATE
        assert pr_repo.get_reviewers("p1") == ["B", "E"]


# ═══════════════════════════════════════════════════════════════════════════
# REVIEWS BY USER
# ═══════════════════════════════════════════════════════════════════════════
class TestGetUserReviews:
    def test_unknown_user(self, pr_service):
        with pytest.raises(DomainError) as exc_info:
            pr_service.get_user_reviews("ghost")
        assert _code(exc_info) is ErrorCode.NOT_FOUND

    def test_no_reviews_is_empty_list(self, team_t, pr_service):
        assert pr_service.get_user_reviews("D") == []

    def test_lists_reviews_newest_first(self, team_t, pr_service):
        pr_service.create_pull_request("p1", "first", "A")
        pr_service.create_pull_request("p2", "second", "A")
        prs = pr_service.get_user_reviews("B")
        assert [p.pull_request_id for p in prs] == ["p2", "p1"]
        assert all(set(p.assigned_reviewers) == {"B", "C"} for p in prs)


# ═══════════════════════════════════════════════════════════════════════════
# TEAMS
# ═══════════════════════════════════════════════════════════════════════════
class TestTeamService:
    def test_create_new_team(self, team_service):
        team = team_service.create_team(make_team("T", ("A", "a", True), ("B", "b", False)))
        assert team.team_name == "T"
        assert [(m.user_id, m.is_active) for m in team.members] == [("A", True), ("B", False)]

    def test_second_call_merges_members(self, team_service):
        team_service.create_team(make_team("T", ("A", "a", True), ("B", "b", True)))
        team = team_service.create_team(make_team("T", ("B", "bob", False), ("C", "c", True)))
        members = {m.user_id: m for m in team.members}
        assert set(members) == {"A", "B", "C"}
        assert members["B"].username == "bob"
        assert members["B"].is_active is False
        assert {m.user_id for m in team_service.get_team("T").members} == {"A", "B", "C"}

    def test_existing_team_empty_payload_keeps_members(self, team_service):
        team_service.create_team(make_team("T", ("A", "a", True)))
        team = team_service.create_team(make_team("T"))
        assert [m.user_id for m in team.members] == ["A"]

    def test_user_moves_between_teams(self, team_service, user_repo):
        team_service.create_team(make_team("T1", ("A", "a", True), ("B", "b", True)))
        team_service.create_team(make_team("T2", ("B", "b2", True)))
        assert user_repo.get_by_id("B").team_name == "T2"
        assert [m.user_id for m in team_service.get_team("T1").members] == ["A"]
        assert [m.user_id for m in team_service.get_team("T2").members] == ["B"]

    def test_duplicate_members_in_payload_collapse(self, team_service):
        team = team_service.create_team(make_team("T", ("A", "a", True), ("A", "a2", False)))
        assert len(team.members) == 1
        assert team.members[0].username == "a2"

    def test_create_race_falls_back_to_sync(self, team_service, team_repo, user_repo):
        team_service.create_team(make_team("T", ("A", "a", True)))
        team_repo.exists = MagicMock(return_value=False)
        team = team_service.create_team(make_team("T", ("B", "b", True)))
        assert {m.user_id for m in team.members} == {"A", "B"}

    def test_user_created_concurrently_is_updated(self, team_service, user_repo):
        team_service.create_team(make_team("T1", ("A", "a", True)))
        user_repo.exists = MagicMock(return_value=False)
        team = team_service.create_team(make_team("T2", ("A", "a2", False)))
        assert [(m.user_id, m.username, m.is_active) for m in team.members] == [("A", "a2", False)]
        user = user_repo.get_by_id("A")
        assert user.team_name == "T2"
        assert user.username == "a2"

    def test_get_missing_team(self, team_service):
        with pytest.raises(DomainError) as exc_info:
            team_service.get_team("nope")
        assert _code(exc_info) is ErrorCode.NOT_FOUND


# ═══════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════
class TestUserService:
    def test_set_is_active(self, team_t, user_service):
        user = user_service.set_is_active("D", True)
        assert user == User(user_id="D", username="Dave", team_name="T", is_active=True)

    def test_set_is_active_missing(self, user_service):
        with pytest.raises(DomainError) as exc_info:
            user_service.set_is_active("ghost", True)
        assert _code(exc_info) is ErrorCode.NOT_FOUND

    def test_get_user(self, team_t, user_service):
        assert user_service.get_user("A").username == "Alice"

    def test_deactivated_user_not_picked(self, team_t, user_service, pr_service):
        user_service.set_is_active("C", False)
        pr = pr_service.create_pull_request("p1", "name", "A")
        assert pr.assigned_reviewers == ["B"]


# ═══════════════════════════════════════════════════════════════════════════
# SCENARIO
# ═══════════════════════════════════════════════════════════════════════════
class TestLifecycleScenario:
    def test_create_reassign_merge(self, team_t, pr_service):
        pr = pr_service.create_pull_request("p1", "name", "A")
        assert set(pr.assigned_reviewers) == {"B", "C"}

        with pytest.raises(DomainError) as exc_info:
            pr_service.reassign_reviewer("p1", "B")
        assert _code(exc_info) is ErrorCode.NO_CANDIDATE

        pr_service.merge_pull_request("p1")
        with pytest.raises(DomainError) as exc_info:
            pr_service.reassign_reviewer("p1", "C")
        assert _code(exc_info) is ErrorCode.PR_MERGED
