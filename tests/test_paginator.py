import pytest

from contract_radar.services.contracts.paginator import (
    PAGE_SIZE_OPTIONS,
    paginate,
    total_pages_for,
)


class TestPaginate:
    def test_twenty_three_items_in_pages_of_ten(self):
        items = list(range(23))

        first = paginate(items, 1, 10)
        assert first.data == list(range(10))
        assert first.total_pages == 3
        assert first.has_next_page
        assert not first.has_prev_page

        last = paginate(items, 3, 10)
        assert last.data == [20, 21, 22]
        assert not last.has_next_page
        assert last.has_prev_page
        assert last.pagination.total_items == 23

    def test_page_length_matches_bounds(self):
        items = list(range(23))
        for size in PAGE_SIZE_OPTIONS:
            for page in range(1, 5):
                result = paginate(items, page, size)
                expected = max(0, min(size, len(items) - (page - 1) * size))
                assert len(result.data) == expected

    def test_pages_reconstruct_the_sequence(self):
        items = [f"c-{i}" for i in range(47)]
        result = paginate(items, 1, 10)
        rebuilt = []
        for page in range(1, result.total_pages + 1):
            rebuilt.extend(paginate(items, page, 10).data)
        assert rebuilt == items

    def test_empty_sequence(self):
        result = paginate([], 1, 10)
        assert result.data == []
        assert result.total_pages == 0
        assert not result.has_next_page
        assert not result.has_prev_page

    def test_page_past_the_end_is_empty(self):
        result = paginate(list(range(5)), 4, 10)
        assert result.data == []
        assert result.total_pages == 1
        assert not result.has_next_page

    def test_page_below_one_is_empty(self):
        result = paginate(list(range(5)), 0, 10)
        assert result.data == []
        assert result.pagination.page == 0

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            paginate([1, 2, 3], 1, 0)

    def test_total_pages(self):
        assert total_pages_for(0, 10) == 0
        assert total_pages_for(1, 10) == 1
        assert total_pages_for(10, 10) == 1
        assert total_pages_for(11, 10) == 2
