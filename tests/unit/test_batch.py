import pytest

from recruitment_api.core.batch import chunk, process_in_batches


def test_chunk_splits_with_remainder():
    assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunk([], 3) == []


def test_chunk_rejects_non_positive_size():
    with pytest.raises(ValueError):
        chunk([1], 0)


@pytest.mark.asyncio
async def test_process_in_batches_collects_results():
    seen = []

    async def double(batch):
        seen.append(list(batch))
        return [x * 2 for x in batch]

    result = await process_in_batches(list(range(5)), double, batch_size=2)
    assert result.successful == [0, 2, 4, 6, 8]
    assert result.failed == []
    assert result.total_batches == 3
    assert seen == [[0, 1], [2, 3], [4]]
    assert result.elapsed_ms >= 0


@pytest.mark.asyncio
async def test_process_in_batches_records_failed_items_when_continuing():
    async def flaky(batch):
        if 3 in batch:
            raise RuntimeError("bad batch")
        return batch

    result = await process_in_batches([1, 2, 3, 4, 5], flaky, batch_size=2, continue_on_error=True)
    assert result.successful == [1, 2, 5]
    assert [f.item for f in result.failed] == [3, 4]
    assert all(str(f.error) == "bad batch" for f in result.failed)


@pytest.mark.asyncio
async def test_process_in_batches_stops_on_error_by_default():
    async def failing(batch):
        raise RuntimeError("stop")

    with pytest.raises(RuntimeError, match="stop"):
        await process_in_batches([1, 2, 3], failing, batch_size=1)
