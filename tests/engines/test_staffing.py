"""
Tests for the staffing planner: profile matching, profile plans and the
guest-count fallback.
"""

from decimal import Decimal

import pytest

from catering_config.schema import (
    BuffetLaborRules,
    MoneyRules,
    PrivateLaborRules,
    StaffingProfile,
    StaffingRules,
)
from catering_engines.staffing import (
    build_plan_from_profile,
    determine_staffing,
    fallback_roles,
    find_matching_profile,
)
from catering_kernel.domain.event import ANY_EVENT_TYPE, ChefRole, EventType, StaffRole

PRIVATE = EventType.PRIVATE_DINNER
BUFFET = EventType.BUFFET


def _profile(profile_id, event_type=PRIVATE, min_guests=0, max_guests=9999, roles=("lead",)):
    return StaffingProfile(
        id=profile_id,
        name=profile_id.title(),
        event_type=event_type,
        min_guests=min_guests,
        max_guests=max_guests,
        roles=roles,
    )


def _rules_with(*profiles, **staffing) -> MoneyRules:
    return MoneyRules(staffing=StaffingRules(profiles=profiles, **staffing))


def _roles(plan):
    return [m.role for m in plan.staff]


# ============================================================================
# Profile matching
# ============================================================================


class TestFindMatchingProfile:
    """Explicit id, event-type preference and narrowest range."""

    def test_explicit_id_wins_outside_guest_range(self):
        small = _profile("small", min_guests=1, max_guests=8)
        large = _profile("large", min_guests=20, max_guests=40)
        match = find_matching_profile([small, large], PRIVATE, 30, "small")
        assert match is small

    def test_explicit_id_wins_for_other_event_type(self):
        buffet = _profile("buffet-crew", event_type=BUFFET)
        assert find_matching_profile([buffet], PRIVATE, 10, "buffet-crew") is buffet

    def test_unknown_id_falls_through_to_auto_match(self, captured_logs):
        standard = _profile("standard", min_guests=9, max_guests=15)
        match = find_matching_profile([standard], PRIVATE, 10, "deleted-profile")
        assert match is standard
        logs = captured_logs()
        assert any(
            r["message"] == "staffing_profile_not_found"
            and r["staffing_profile_id"] == "deleted-profile"
            for r in logs
        )

    def test_exact_event_type_beats_any(self):
        wide_exact = _profile("exact", min_guests=0, max_guests=100)
        narrow_any = _profile("any", event_type=ANY_EVENT_TYPE, min_guests=10, max_guests=12)
        match = find_matching_profile([narrow_any, wide_exact], PRIVATE, 11)
        assert match is wide_exact

    def test_any_profile_matches_every_event_type(self):
        generic = _profile("generic", event_type=ANY_EVENT_TYPE)
        assert find_matching_profile([generic], BUFFET, 50) is generic

    def test_narrowest_range_wins(self):
        wide = _profile("wide", min_guests=1, max_guests=50)
        narrow = _profile("narrow", min_guests=10, max_guests=20)
        assert find_matching_profile([wide, narrow], PRIVATE, 15) is narrow

    def test_ties_keep_configuration_order(self):
        first = _profile("first", min_guests=10, max_guests=20)
        second = _profile("second", min_guests=5, max_guests=15)
        assert find_matching_profile([first, second], PRIVATE, 12) is first
        assert find_matching_profile([second, first], PRIVATE, 12) is second

    def test_range_bounds_inclusive(self):
        profile = _profile("p", min_guests=9, max_guests=15)
        assert find_matching_profile([profile], PRIVATE, 9) is profile
        assert find_matching_profile([profile], PRIVATE, 15) is profile
        assert find_matching_profile([profile], PRIVATE, 16) is None

    def test_other_event_type_excluded(self):
        buffet = _profile("buffet-crew", event_type=BUFFET)
        assert find_matching_profile([buffet], PRIVATE, 10) is None

    def test_no_profiles(self):
        assert find_matching_profile([], PRIVATE, 10) is None


# ============================================================================
# Profile plans
# ============================================================================


class TestBuildPlanFromProfile:
    """Profile roles become slots, in order, with configured pay terms."""

    def test_slots_follow_profile_order(self):
        profile = _profile("mixed", roles=("assistant", "lead", "full", "overflow", "buffet"))
        plan = build_plan_from_profile(profile, MoneyRules())
        assert _roles(plan) == [
            StaffRole.ASSISTANT,
            StaffRole.LEAD,
            StaffRole.FULL,
            StaffRole.OVERFLOW,
            StaffRole.BUFFET,
        ]
        assert plan.total_staff_count == 5
        assert plan.chef_roles == (ChefRole.LEAD, ChefRole.FULL, ChefRole.OVERFLOW, ChefRole.BUFFET)
        assert plan.assistant_needed is True

    def test_pay_terms_read_per_role(self):
        profile = _profile("mixed", roles=("lead", "overflow", "full", "buffet", "assistant"))
        plan = build_plan_from_profile(profile, MoneyRules())
        percents = [m.base_pay_percent for m in plan.staff]
        assert percents == [
            Decimal("15"), Decimal("12"), Decimal("10"), Decimal("12"), Decimal("8"),
        ]

    def test_caps_carried_from_rules(self):
        rules = MoneyRules(
            private_labor=PrivateLaborRules(lead_chef_cap=Decimal("350")),
            buffet_labor=BuffetLaborRules(chef_cap=Decimal("200")),
        )
        plan = build_plan_from_profile(_profile("p", roles=("lead", "buffet", "assistant")), rules)
        assert [m.cap for m in plan.staff] == [Decimal("350"), Decimal("200"), None]

    def test_non_positive_cap_means_uncapped(self):
        rules = MoneyRules(private_labor=PrivateLaborRules(lead_chef_cap=Decimal("0")))
        plan = build_plan_from_profile(_profile("p"), rules)
        assert plan.staff[0].cap is None

    def test_matched_profile_recorded(self):
        plan = build_plan_from_profile(_profile("standard"), MoneyRules())
        assert plan.matched_profile_id == "standard"
        assert plan.matched_profile_name == "Standard"

    def test_empty_roles_give_empty_plan(self):
        plan = build_plan_from_profile(_profile("empty", roles=()), MoneyRules())
        assert plan.staff == ()
        assert plan.total_staff_count == 0


# ============================================================================
# Fallback plans
# ============================================================================


class TestFallbackStaffing:
    """Guest-count thresholds when no profile matches."""

    def test_buffet_forty_guests_two_chefs(self):
        plan = determine_staffing(40, BUFFET, MoneyRules())
        assert _roles(plan) == [StaffRole.BUFFET, StaffRole.BUFFET]
        assert plan.assistant_needed is False
        assert plan.matched_profile_id is None

    def test_buffet_never_gets_assistant(self):
        plan = determine_staffing(10, BUFFET, _rules_with(assistant_required=True))
        assert StaffRole.ASSISTANT not in _roles(plan)

    def test_buffet_zero_guests_no_staff(self):
        assert determine_staffing(0, BUFFET, MoneyRules()).staff == ()

    @pytest.mark.parametrize(
        "guests, chefs",
        [
            (1, [StaffRole.LEAD]),
            (15, [StaffRole.LEAD]),
            (16, [StaffRole.OVERFLOW]),
            (30, [StaffRole.OVERFLOW]),
            (31, [StaffRole.LEAD, StaffRole.FULL]),
            (45, [StaffRole.LEAD, StaffRole.FULL]),
            (46, [StaffRole.LEAD, StaffRole.FULL, StaffRole.FULL]),
        ],
    )
    def test_private_thresholds(self, guests, chefs):
        plan = determine_staffing(guests, PRIVATE, MoneyRules())
        assert _roles(plan) == chefs + [StaffRole.ASSISTANT]

    def test_private_without_assistant(self):
        plan = determine_staffing(10, PRIVATE, _rules_with(assistant_required=False))
        assert _roles(plan) == [StaffRole.LEAD]
        assert plan.assistant_needed is False

    def test_non_positive_maximum_treated_as_one(self):
        rules = _rules_with(max_guests_per_chef_buffet=0)
        assert fallback_roles(3, BUFFET, rules) == [StaffRole.BUFFET] * 3

    def test_fallback_logged(self, captured_logs):
        determine_staffing(10, PRIVATE, MoneyRules())
        logs = captured_logs()
        fallback = [r for r in logs if r["message"] == "staffing_fallback_applied"]
        assert fallback[0]["roles"] == ["lead", "assistant"]


class TestDetermineStaffing:
    """Profiles take precedence over the fallback."""

    def test_matching_profile_used(self):
        rules = _rules_with(_profile("standard", min_guests=9, max_guests=15, roles=("lead", "assistant")))
        plan = determine_staffing(12, PRIVATE, rules)
        assert plan.matched_profile_id == "standard"

    def test_explicit_profile_outside_range(self):
        rules = _rules_with(_profile("small", min_guests=1, max_guests=8, roles=("lead",)))
        plan = determine_staffing(40, PRIVATE, rules, staffing_profile_id="small")
        assert _roles(plan) == [StaffRole.LEAD]
        assert plan.total_staff_count == 1

    def test_deleted_profile_falls_back(self):
        plan = determine_staffing(10, PRIVATE, MoneyRules(), staffing_profile_id="gone")
        assert plan.matched_profile_id is None
        assert _roles(plan) == [StaffRole.LEAD, StaffRole.ASSISTANT]

    def test_profile_match_logged(self, captured_logs):
        rules = _rules_with(_profile("standard"))
        determine_staffing(12, PRIVATE, rules)
        logs = captured_logs()
        matched = [r for r in logs if r["message"] == "staffing_profile_matched"]
        assert matched[0]["profile_id"] == "standard"
        assert matched[0]["explicit"] is False
