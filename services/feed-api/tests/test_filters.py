from datetime import datetime, timedelta

import pytest

from conftest import make_post, query
from geofeed.feed.filters import (
    filter_posts,
    matches_categories,
    matches_date_range,
    matches_keyword,
)


class TestCategoryFilter:
    def test_no_categories_accepts_everything(self):
        post = make_post(category=None)
        assert matches_categories(post, None)
        assert matches_categories(post, [])

    def test_exact_case_sensitive_match(self):
        post = make_post(category="Lost Item")
        assert matches_categories(post, ["Flooding", "Lost Item"])
        assert not matches_categories(post, ["lost item"])

    def test_uncategorised_post_rejected_by_allow_list(self):
        assert not matches_categories(make_post(category=None), ["Lost Item"])

    def test_keeps_relative_order(self):
        first = make_post(category="Lost Item")
        flood = make_post(category="Flooding")
        second = make_post(category="Lost Item")

        result = filter_posts([first, flood, second], query(categories=["Lost Item"]))

        assert result == [first, second]


class TestKeywordFilter:
    @pytest.mark.parametrize("keyword", ["wallet", "WALLET", "Wallet", "park"])
    def test_matches_title_any_case(self, keyword):
        post = make_post(title="Lost wallet near the park", caption="nothing here")
        assert matches_keyword(post, keyword)

    def test_matches_caption(self):
        post = make_post(title="Street light", caption="Can't see anything in the DARK")
        assert matches_keyword(post, "dark")

    def test_absent_keyword_rejects(self):
        post = make_post(title="Street light", caption="broken again")
        assert not matches_keyword(post, "wallet")

    def test_missing_title_and_empty_keyword(self):
        post = make_post(title=None, caption="Found keys")
        assert matches_keyword(post, "keys")
        assert matches_keyword(post, "")
        assert matches_keyword(post, None)


class TestDateRangeFilter:
    start = datetime(2025, 3, 1, 0, 0)
    end = datetime(2025, 3, 31, 23, 59, 59)

    def test_bounds_are_inclusive(self):
        assert matches_date_range(make_post(created_at=self.start), self.start, self.end)
        assert matches_date_range(make_post(created_at=self.end), self.start, self.end)

    def test_just_outside_bounds_excluded(self):
        tick = timedelta(microseconds=1)
        assert not matches_date_range(make_post(created_at=self.start - tick), self.start, self.end)
        assert not matches_date_range(make_post(created_at=self.end + tick), self.start, self.end)

    def test_open_ended_ranges(self):
        post = make_post(created_at=datetime(1999, 1, 1))
        assert matches_date_range(post, None, None)
        assert matches_date_range(post, None, self.end)
        assert not matches_date_range(post, self.start, None)


def test_all_filters_are_combined():
    match = make_post(category="Lost Item", title="Lost wallet", created_at=datetime(2025, 3, 6))
    wrong_category = make_post(category="Flooding", title="Lost wallet", created_at=datetime(2025, 3, 6))
    wrong_keyword = make_post(category="Lost Item", title="Lost book", caption="", created_at=datetime(2025, 3, 6))
    too_old = make_post(category="Lost Item", title="Lost wallet", created_at=datetime(2024, 1, 1))

    result = filter_posts(
        [match, wrong_category, wrong_keyword, too_old],
        query(categories=["Lost Item"], keyword="wallet", date_from=datetime(2025, 1, 1)),
    )

    assert result == [match]
